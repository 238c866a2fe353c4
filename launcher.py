import logging
from argparse import ArgumentParser, Namespace
from dataclasses import replace
from signal import signal, SIGINT
from threading import Event
import sys

from stablefluids.Exceptions import FluidError
from stablefluids.Settings import Settings
from stablefluids.backend.gl import ShaderLibrary
from stablefluids.render import FluidWindow


if __name__ == '__main__':
    parser: ArgumentParser = ArgumentParser(description='Real-time 2D stable fluids')
    parser.add_argument('-s',      '--settings',        type=str, default='default',help='settings file')
    parser.add_argument('-fps',    '--fps',             type=float, default=None,   help='frame cap, overrides settings')
    parser.add_argument('-hr',     '--hotreload',       action='store_true',        help='recompile shaders when their files change')
    parser.add_argument('-sd',     '--shaders',         type=str, default=None,     help='shader directory')
    parser.add_argument('-v',      '--verbose',         action='store_true',        help='debug logging')

    args: Namespace = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s %(levelname)s %(threadName)s: %(message)s',
    )

    settings_path: str = f"files/settings/{args.settings}.json"
    logging.info(f"Loading settings from: {settings_path}")
    try:
        settings: Settings = Settings.load(settings_path)
    except FluidError as e:
        logging.error(e)
        sys.exit(1)

    # Window fields are fixed once built, so overrides go through a new instance
    overrides: dict = {}
    if args.fps is not None:
        overrides['fps'] = args.fps
    if args.hotreload:
        overrides['hot_reload'] = True
    if overrides:
        settings.window = replace(settings.window, **overrides)

    library = ShaderLibrary(args.shaders) if args.shaders else ShaderLibrary()
    app = FluidWindow(settings, library)
    app.start()

    shutdown_event = Event()

    def signal_handler_exit(sig, frame) -> None:
        logging.info("Received interrupt signal, shutting down...")
        shutdown_event.set()
        if app.is_running:
            app.stop()

    signal(SIGINT, signal_handler_exit)

    while app.is_running and not shutdown_event.is_set():
        shutdown_event.wait(0.01)

    sys.exit(1 if app.error is not None else 0)
