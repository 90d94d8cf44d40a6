#!/usr/bin/env python3
"""
CueTimer Runner - Starts the timer control API
"""

from waitress import serve

from cuetimer import get_app_info
from cuetimer.app import create_app
from cuetimer.config import load_config
from cuetimer.utils.logger import log_shutdown, log_startup, setup_logger


def main() -> None:
    logger = setup_logger("cuetimer")
    log_startup("cuetimer")

    config = load_config()
    host = config.get("host", "127.0.0.1")
    port = int(config.get("port", 5055))
    debug_mode = config.get("debug", False)

    app = create_app(config)

    logger.info(f"🚀 Starting {get_app_info()} on {host}:{port}")
    logger.info(f"🌍 Environment: {config.get('environment', 'unknown')}")
    logger.info(f"🔧 Debug mode: {debug_mode}")

    try:
        if debug_mode:
            # The reloader would start a second ticker and playback thread
            app.run(host=host, port=port, debug=True, use_reloader=False)
        else:
            serve(app, host=host, port=port, threads=4)
    except KeyboardInterrupt:
        pass
    finally:
        log_shutdown(logger, "CueTimer")


if __name__ == "__main__":
    main()
