import kopf
import logging
import kdm.handlers.metadata as metadata  # noqa: F401
import kdm.handlers.probes as probes  # noqa: F401
from kdm.types.settings import Settings
from kdm.metadata import MetadataController
from kdm.resources import KubernetesObjectStore, KubernetesSettingsSink
from kdm.resources.base import BaseResource
from kdm.sensors import init_metrics_server, SensorDelegate, PrometheusMonitor
from kdm.utils.errors import MetadataError
from kubernetes_asyncio import config
from kubernetes_asyncio.client.api_client import ApiClient


@kopf.on.startup()
async def setup(
    settings: kopf.OperatorSettings, memo: kopf.Memo, logger: logging.Logger, **kwargs
):
    # Load Kubernetes config - try in-cluster first (for production), then local kubeconfig (for dev)
    try:
        config.load_incluster_config()
        logger.info("Loaded in-cluster Kubernetes configuration")
    except config.ConfigException:
        logger.info("In-cluster config not found, trying local kubeconfig")
        try:
            await config.load_kube_config()
            logger.info("Loaded local Kubernetes configuration")
        except config.ConfigException as e:
            logger.error(f"Failed to load Kubernetes configuration: {e}")
            raise

    memo.conf = Settings()

    # Create a shared ApiClient for all resources to prevent connection leaks
    shared_client = ApiClient()
    BaseResource.shared_api_client = shared_client
    memo.api_client = shared_client
    logger.info("Shared Kubernetes API client initialized")

    sensor_delegate = SensorDelegate()
    sensor_delegate.add(PrometheusMonitor())
    memo.sensor = sensor_delegate

    if memo.conf.metrics_enabled:
        try:
            init_metrics_server(memo.conf.metrics_port)
        except Exception as e:
            logger.error(f"Failed to start metrics server: {e}")
            # Don't fail operator startup if metrics server fails
            logger.warning("Continuing without metrics server")

    memo.controller = MetadataController(
        KubernetesObjectStore(shared_client),
        KubernetesSettingsSink(shared_client),
        conf=memo.conf,
        sensor=sensor_delegate,
    )
    logger.info(
        f"Driver metadata controller ready for management plane {memo.controller.rancher_version}"
    )

    # Passes must not overlap, the differ is not safe against itself
    settings.batching.worker_limit = 1

    settings.posting.enabled = True
    settings.posting.level = logging.WARNING

    try:
        await memo.controller.refresh(trigger_source="startup")
    except MetadataError as e:
        logger.error(f"Initial driver metadata pass failed, retrying on next refresh: {e}")


@kopf.on.cleanup()
async def cleanup(memo: kopf.Memo, logger: logging.Logger, **kwargs):
    """Cleanup handler for operator shutdown."""
    logger.info("Shutting down operator...")

    if getattr(memo, "api_client", None):
        await memo.api_client.close()
        logger.info("Shared API client closed")

    logger.info("Operator shutdown complete")


__all__ = [
    "metadata",
    "probes",
]
