"""
Command line entry point

    mdrender render post.md -o post.html
    mdrender serve --port 8765
"""

import argparse
import logging
import sys
from pathlib import Path

from mdrender.config import DEFAULT_HEIGHT, DEFAULT_WIDTH, RenderConfig
from mdrender.errors import ConfigError

logger = logging.getLogger('mdrender')


def build_parser():
    parser = argparse.ArgumentParser(prog='mdrender', description='Render markdown to HTML')
    parser.add_argument('--log-level', default='WARNING',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level (default WARNING)')
    subparsers = parser.add_subparsers(dest='command', required=True)

    render_parser = subparsers.add_parser('render', help='Render a markdown file')
    render_parser.add_argument('file', nargs='?', help='Markdown file (default stdin)')
    render_parser.add_argument('-o', '--output', help='Write HTML here (default stdout)')
    add_size_arguments(render_parser)

    serve_parser = subparsers.add_parser('serve', help='Run the HTTP render service')
    serve_parser.add_argument('--port', type=int, default=8765, help='HTTP server port')
    serve_parser.add_argument('--log-file', type=Path, default=None,
                              help='Also log to this file')
    add_size_arguments(serve_parser)

    return parser


def add_size_arguments(parser):
    parser.add_argument('--default-height', default=DEFAULT_HEIGHT,
                        help=f'Height for images without one (default {DEFAULT_HEIGHT})')
    parser.add_argument('--default-width', default=DEFAULT_WIDTH,
                        help=f'Width for images without one (default {DEFAULT_WIDTH})')


def render_command(args, config):
    # Imported here so `serve` and `render` only pay for what they use
    from mdrender.pipeline import render_markdown

    if args.file:
        markdown_text = Path(args.file).read_text(encoding='utf-8')
    else:
        markdown_text = sys.stdin.read()

    html = render_markdown(markdown_text, config)

    if args.output:
        Path(args.output).write_text(html, encoding='utf-8')
        logger.info(f"Wrote {len(html)} bytes to {args.output}")
    else:
        sys.stdout.write(html)
        if not html.endswith('\n'):
            sys.stdout.write('\n')


def serve_command(args, config):
    from mdrender.render_server import RenderServer, run, setup_logging

    setup_logging(args.log_file, level=getattr(logging, args.log_level))
    logger.info("=" * 60)
    logger.info("Starting mdrender render server")
    logger.info(f"HTTP port: {args.port}")
    logger.info(f"Default image size: {config.default_width}x{config.default_height}")
    logger.info("=" * 60)

    run(RenderServer(port=args.port, config=config))


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == 'render':
        logging.basicConfig(level=getattr(logging, args.log_level),
                            format='%(levelname)s: %(message)s', stream=sys.stderr)

    try:
        config = RenderConfig(default_height=args.default_height,
                              default_width=args.default_width)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        if args.command == 'render':
            render_command(args, config)
        else:
            serve_command(args, config)
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
