"""Entry point for the widgetbridge CLI."""

import asyncio

from widgetbridge.cli.arg_parser import build_parser, parse_args


def main(argv: list[str] | None = None) -> None:
    """Entry point for the widgetbridge CLI."""
    args = parse_args(argv)
    try:
        if args.command == "serve":
            from widgetbridge.cli.serve import run_serve

            exit_code = asyncio.run(run_serve(
                config_path=args.config,
                host=args.host,
                port=args.port,
                verbose=args.verbose,
                log_dir=args.log_dir,
            ))
        elif args.command == "config":
            from widgetbridge.cli.serve import run_show_config

            exit_code = run_show_config(args.config)
        else:
            build_parser().print_help()
            exit_code = 1
        raise SystemExit(exit_code)
    except KeyboardInterrupt:
        # Ctrl+C stops the server
        pass


if __name__ == "__main__":
    main()
