"""
Zeebe worker wiring: channel, task registration, run loop.

Job polling, activation, completion and token refresh are handled by
pyzeebe; this module only configures it.
"""

import asyncio
import signal
from typing import Optional

import grpc
from pyzeebe import (
    ZeebeWorker,
    create_camunda_cloud_channel,
    create_insecure_channel,
    create_oauth2_client_credentials_channel,
)

from .config import DEFAULT_ZEEBE_ADDRESS, ConfigError, WorkerSettings
from .handler import make_evaluation_handler, make_exception_handler
from .logger import StructuredLogger
from .scoring import Scorer, get_scorer


def describe_target(settings: WorkerSettings) -> str:
    if settings.has_credentials and settings.cluster_id:
        return f"{settings.cluster_id}.{settings.region}.zeebe.camunda.io:443"
    return settings.zeebe_address or DEFAULT_ZEEBE_ADDRESS


def create_channel(settings: WorkerSettings) -> grpc.aio.Channel:
    """
    Open the gRPC channel matching the configured credentials.

    Camunda SaaS when a cluster id is given, OAuth against an explicit
    gateway address when only credentials are given, plaintext otherwise.
    """
    if settings.has_credentials and settings.cluster_id:
        return create_camunda_cloud_channel(
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            cluster_id=settings.cluster_id,
            region=settings.region,
        )
    if settings.has_credentials:
        if not settings.zeebe_address:
            raise ConfigError("ZEEBE_ADDRESS or CAMUNDA_CLUSTER_ID is required when client credentials are set")
        return create_oauth2_client_credentials_channel(
            grpc_address=settings.zeebe_address,
            client_id=settings.client_id,
            client_secret=settings.client_secret,
            authorization_server=settings.authorization_server,
            audience=settings.token_audience,
        )
    return create_insecure_channel(grpc_address=settings.zeebe_address or DEFAULT_ZEEBE_ADDRESS)


def register_evaluation_task(
    worker,
    settings: WorkerSettings,
    logger: StructuredLogger,
    scorer: Optional[Scorer] = None,
):
    """Register the evaluation handler on *worker* under the configured task type."""
    if scorer is None:
        scorer = get_scorer(settings.scoring, fixed_value=settings.fixed_score, seed=settings.random_seed)

    handler = make_evaluation_handler(scorer, logger)
    worker.task(
        task_type=settings.task_type,
        exception_handler=make_exception_handler(logger),
        timeout_ms=settings.job_timeout_ms,
        max_jobs_to_activate=settings.max_jobs_to_activate,
        max_running_jobs=settings.max_running_jobs,
    )(handler)

    logger.debug(
        "Registered task handler",
        task_type=settings.task_type,
        scoring=settings.scoring,
        timeout_ms=settings.job_timeout_ms,
    )
    return handler


def build_worker(
    settings: WorkerSettings,
    logger: StructuredLogger,
    channel: Optional[grpc.aio.Channel] = None,
) -> ZeebeWorker:
    if channel is None:
        channel = create_channel(settings)
    worker = ZeebeWorker(channel)
    register_evaluation_task(worker, settings, logger)
    return worker


async def serve(settings: WorkerSettings, logger: StructuredLogger) -> None:
    """Run the worker until SIGINT/SIGTERM, then log the session metrics."""
    channel = create_channel(settings)
    worker = build_worker(settings, logger, channel)
    loop = asyncio.get_running_loop()
    stopping = []

    def handle_signal(sig_name: str) -> None:
        if stopping:
            return
        logger.info("Received signal, stopping worker", signal=sig_name)
        stopping.append(loop.create_task(worker.stop()))

    try:
        loop.add_signal_handler(signal.SIGTERM, handle_signal, "SIGTERM")
        loop.add_signal_handler(signal.SIGINT, handle_signal, "SIGINT")
    except NotImplementedError:
        logger.debug("Signal handlers not supported on this platform")

    logger.info(
        "Worker connected to Zeebe",
        target=describe_target(settings),
        task_type=settings.task_type,
        scoring=settings.scoring,
    )
    try:
        await worker.work()
        if stopping:
            await stopping[0]
    finally:
        await channel.close()
        logger.log_metrics_summary()
