import sys
import argparse


def identify_app(argv):

    parser = argparse.ArgumentParser(
        prog='pamcore',
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
        description="Main entry point for pamcore apps.")

    parser.add_argument(
        "appname",
        choices={'kmedoids'},
        help="Name of the application.")

    parser.add_argument(
        "appargs", nargs=argparse.REMAINDER,
        help="Subsequent arguments to the app (add subcommand for more).")

    args = parser.parse_args(argv[1:])

    if args.appname == 'kmedoids':
        from pamcore.apps.kmedoids import main

    args.main = main
    args.argv = [args.appname] + args.appargs

    return args


def main(argv=None):

    if argv is None:
        argv = sys.argv

    args = identify_app(argv)

    try:
        return args.main(args.argv)
    except Exception:
        message = ("An unexpected error has occurred; please consider filing "
                   "an issue with the full traceback below.")
        print(message, file=sys.stderr)
        raise


if __name__ == "__main__":
    sys.exit(main(sys.argv))
