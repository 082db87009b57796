#!/usr/bin/env python3
"""
Usage:
    main.py [--configuration-file FILE] [--in-memory]

Options:
    --configuration-file FILE    Load config variables from FILE
    --in-memory                  Keep the waiting pool in memory instead of
                                 using the database
"""

import asyncio
import logging
import os
import platform
import signal
import sys
import time
from datetime import datetime, timezone

import humanize
from docopt import docopt
from prometheus_client import start_http_server

import lobby
from lobby import metrics
from lobby.config import config
from lobby.matchmaker import MatchmakingSettings


def build_info(version: str, python_version: str) -> dict:
    return {
        "version": version,
        "python_version": python_version,
        "start_time": datetime.now(timezone.utc).strftime("%m-%d %H:%M"),
    }


async def main(in_memory: bool):
    global startup_time, shutdown_time

    version = os.environ.get("VERSION") or "dev"
    python_version = platform.python_version()

    logger.info(
        "Lobby matchmaker %s (Python %s) on %s",
        version,
        python_version,
        sys.platform
    )

    loop = asyncio.get_running_loop()
    done = loop.create_future()

    logger.info("Event loop: %s", loop)

    def signal_handler(sig: int, _frame):
        logger.info(
            "Received signal %s, shutting down",
            signal.Signals(sig)
        )
        if not done.done():
            done.set_result(0)

    # Make sure we can shutdown gracefully
    signal.signal(signal.SIGTERM, signal_handler)
    signal.signal(signal.SIGINT, signal_handler)

    database = None
    if in_memory:
        logger.warning(
            "Using an in memory waiting pool. Waiting users are lost on restart."
        )
        store = lobby.InMemoryWaitingPool()
    else:
        database = lobby.LobbyDatabase(
            host=config.DB_SERVER,
            port=int(config.DB_PORT),
            user=config.DB_LOGIN,
            password=config.DB_PASSWORD,
            db=config.DB_NAME
        )
        store = lobby.DatabaseWaitingPool(database)

    if config.ENABLE_METRICS:
        logger.info("Using prometheus on port %i", config.METRICS_PORT)
        start_http_server(config.METRICS_PORT)

    configuration_service = lobby.ConfigurationService()
    matchmaker_service = lobby.MatchmakerService(store)

    await configuration_service.initialize()
    await matchmaker_service.initialize()

    metrics.info.info(build_info(version, python_version))
    logger.info(
        "Server started in %0.2f seconds",
        time.perf_counter() - startup_time
    )

    exit_code = await done

    shutdown_time = time.perf_counter()

    # Cleanup
    await matchmaker_service.shutdown()
    await configuration_service.shutdown()

    # Close DB connections
    if database is not None:
        await database.close()

    return exit_code


if __name__ == "__main__":
    startup_time = time.perf_counter()
    shutdown_time = None

    args = docopt(__doc__, version="Lobby matchmaker")
    config_file = args.get("--configuration-file")
    if config_file:
        os.environ["CONFIGURATION_FILE"] = config_file

    logger = logging.getLogger()
    stderr_handler = logging.StreamHandler()
    stderr_handler.setFormatter(
        logging.Formatter(
            fmt="%(levelname)-8s %(asctime)s %(name)-30s %(message)s",
            datefmt="%b %d  %H:%M:%S"
        )
    )
    logger.addHandler(stderr_handler)
    logger.setLevel(logging.INFO)

    config.refresh()
    logger.setLevel(config.LOG_LEVEL)

    # Fail before anything is started if the tuning values are unusable
    try:
        MatchmakingSettings.from_config(config)
    except lobby.ConfigurationError as e:
        logger.critical("Invalid configuration: %s", e)
        exit(1)

    if config.USE_UVLOOP:
        import uvloop
        asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

    exit_code = asyncio.run(main(args.get("--in-memory")))

    stop_time = time.perf_counter()
    logger.info(
        "Total server uptime: %s",
        humanize.naturaldelta(stop_time - startup_time)
    )

    if shutdown_time is not None:
        logger.info(
            "Server shut down in %0.2f seconds",
            stop_time - shutdown_time
        )

    if exit_code:
        logger.error("Server shut down with exit code: %s", exit_code)

    exit(exit_code)
