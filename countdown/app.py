import argparse
import signal
import sys
from PySide6.QtCore import QCoreApplication, QTimer
from countdown.common.logger import configure_logging, log
from countdown.common.setup import ProjectPaths
from countdown.core.config import TimerConfig, load_config
from countdown.core.formatting import format_clock
from countdown.core.scheduler import QtScheduler
from countdown.core.timer import CountdownTimer


def build_parser():
    parser = argparse.ArgumentParser(
        prog="countdown",
        description="Run a single countdown/elapsed timer in the terminal.",
    )
    parser.add_argument("--config", help="JSON file with start_at/count_down/update_interval_ms (default: the saved timer config)")
    parser.add_argument("--start-at", type=int, help="Start/target value in milliseconds, negative counts up to zero")
    parser.add_argument("--count-down", action="store_true", default=None, help="Stop and fire the countdown callback at zero")
    parser.add_argument("--interval", type=int, help="Update interval in milliseconds")
    parser.add_argument("--last-event-time", type=int, help="Epoch ms of the last start/stop, to pick a timer back up")
    parser.add_argument("--delay", type=int, default=0, help="Milliseconds after --last-event-time to start")
    parser.add_argument("--compensate", action="store_true", help="Fast-forward by the time elapsed since --last-event-time")
    parser.add_argument("--exit-on-countdown", action="store_true", help="Quit once the countdown reaches zero")
    parser.add_argument("--verbose", action="store_true", help="Echo debug logging to the console")
    parser.add_argument("--no-log-file", action="store_true", help="Don't write countdown.log in the data folder")
    return parser


# Prints each render on one overwritten terminal line.
def _print_clock(parts):
    sys.stdout.write(f"\r{format_clock(parts)}")
    sys.stdout.flush()


def main(argv=None):
    args = build_parser().parse_args(argv)
    paths = None if args.no_log_file else ProjectPaths.build()
    configure_logging(paths.logs if paths else None, console=args.verbose)

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    overrides = {
        "start_at": args.start_at,
        "count_down": args.count_down,
        "update_interval_ms": args.interval,
    }
    params = load_config(args.config).as_params()
    params.update({name: value for name, value in overrides.items() if value is not None})
    params["display_function"] = _print_clock

    def on_countdown(timer):
        sys.stdout.write("\n")
        log.info(f"Countdown finished, timer reset to {timer.start_at}")
        if args.exit_on_countdown:
            app.quit()

    params["countdown_callback"] = on_countdown

    timer = CountdownTimer(TimerConfig.from_dict(params), scheduler=QtScheduler(app))
    timer.set(
        action="start",
        last_event_time=args.last_event_time,
        delay_action=args.delay,
        compensate=args.compensate,
    )

    # Qt swallows Ctrl+C while the event loop runs, so route SIGINT through quit() and give Python a chance to see it.
    previous_sigint = signal.signal(signal.SIGINT, lambda *_: app.quit())
    heartbeat = QTimer(app)
    heartbeat.timeout.connect(lambda: None)
    heartbeat.start(200)

    try:
        exit_code = app.exec()
    finally:
        heartbeat.stop()
        signal.signal(signal.SIGINT, previous_sigint)
        timer.dispose()
    sys.stdout.write("\n")
    log.info(f"Exiting with timer at {timer.info().as_dict()}")
    return exit_code
