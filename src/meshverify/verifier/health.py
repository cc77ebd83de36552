"""Readiness predicates for fetched workloads and jobs."""

from kubernetes.client.models import V1Deployment, V1Job

from meshverify.core.exceptions import NotCompleteError, NotReadyError


def verify_deployment_status(deployment: V1Deployment) -> None:
    """Check that a deployment has all desired replicas ready.

    A deployment that exceeded its progress deadline is never ready. A
    deployment scaled to zero is ready.

    Args:
        deployment: Live deployment

    Raises:
        NotReadyError: If the deployment is not ready
    """
    name = deployment.metadata.name if deployment.metadata else ""
    status = deployment.status
    conditions = (status.conditions if status else None) or []

    for condition in conditions:
        if condition.type == "Progressing" and condition.reason == "ProgressDeadlineExceeded":
            raise NotReadyError(f'deployment "{name}" exceeded its progress deadline')

    desired = (deployment.spec.replicas if deployment.spec else None) or 0
    ready = (status.ready_replicas if status else None) or 0

    if ready < desired:
        raise NotReadyError(
            f'deployment "{name}" is not ready: {ready} out of {desired} replicas are ready'
        )


def verify_job_post_install(job: V1Job) -> None:
    """Check that a job completed successfully.

    Args:
        job: Live job

    Raises:
        NotCompleteError: If the job failed or has not completed yet
    """
    namespace = job.metadata.namespace if job.metadata else ""
    name = job.metadata.name if job.metadata else ""
    conditions = (job.status.conditions if job.status else None) or []

    for condition in conditions:
        if condition.type == "Failed" and condition.status == "True":
            raise NotCompleteError(f"the required Job {namespace}/{name} failed")

    if not any(c.type == "Complete" and c.status == "True" for c in conditions):
        raise NotCompleteError(f"the required Job {namespace}/{name} has not completed")
