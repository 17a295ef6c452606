import logging

from django.db.models.signals import post_save
from django.dispatch import receiver

from core.models import Analysis, Notification

logger = logging.getLogger(__name__)


@receiver(post_save, sender=Analysis)
def notify_analysis_finished(sender, instance, created, update_fields=None, **kwargs):
    """
    Tell the owner when scoring finishes.
    Only saves that write ``status`` into a terminal state create a notification.
    """
    if created or not update_fields or "status" not in update_fields:
        return

    if instance.status == Analysis.Status.COMPLETED:
        Notification.objects.create(
            user_id=instance.user_id,
            analysis=instance,
            title="Analysis Completed",
            message=f"Your analysis '{instance.title}' is ready with a Vastu score of {instance.overall_score}.",
            notification_type="analysis_completed",
        )
    elif instance.status == Analysis.Status.FAILED:
        Notification.objects.create(
            user_id=instance.user_id,
            analysis=instance,
            title="Analysis Failed",
            message=f"We could not complete your analysis '{instance.title}'. Please try again later.",
            notification_type="analysis_failed",
        )
    else:
        return
    logger.info(
        "Created %s notification for user %s on analysis %s",
        instance.status,
        instance.user_id,
        instance.id,
    )
