import datetime
import logging

from linkcheck.api.schemas import LinkCheckResult
from linkcheck.core.celery_app import celery_app
from linkcheck.core.config import settings
from linkcheck.services.report import format_duration
from linkcheck.services.runner import LinkCheckRunner, SourceError
from linkcheck.utils.redis_client import get_redis_client

redis_client = get_redis_client()

# Result lists live as long as the Celery task metadata.
RESULT_TTL = 3600


def store_error(store, task_id, url, error_msg):
    """Helper function to store errors in Redis."""
    error_data = LinkCheckResult(url=url, status="error", error=error_msg, source=url)
    store.rpush(task_id, error_data.model_dump_json(exclude_none=True))
    logging.error(f"Error stored for {url}: {error_msg}")


def run_scan(store, task_id, url, options=None, only_dead=False):
    """Check every link on one page and push each result to the task's Redis list.

    With ``only_dead`` only broken links are stored and counted.
    """
    check_options = settings.check_options(**(options or {}))
    runner = LinkCheckRunner(check_options)

    logging.info(f"Checking page: {url} (task {task_id})")
    report = runner.run([url], only_dead=only_dead)

    for entry in report.entries:
        store.rpush(task_id, LinkCheckResult.from_entry(entry).model_dump_json(exclude_none=True))
    for error in report.errors:
        store_error(store, task_id, error.source, error.message)
    store.expire(task_id, RESULT_TTL)

    summary = report.summary
    logging.info(f"Finished {url}: {summary.valid} valid, {summary.invalid} invalid")
    return {
        "status": "error" if report.errors else "completed",
        "total": summary.total,
        "valid": summary.valid,
        "invalid": summary.invalid,
        "duration": format_duration(report.duration),
    }


@celery_app.task(name="linkcheck.services.scanner.check_page", queue="default", bind=True)
def check_page(self, task_id, url, options=None, only_dead=False):
    """Celery task: check the links of a web page and store the results."""
    try:
        self.update_state(
            state='STARTED',
            meta={
                'task_id': task_id,
                'status': 'STARTED',
                'result': None,
                'traceback': None,
                'children': [],
                'date_done': None
            }
        )

        result = run_scan(redis_client, task_id, url, options, only_dead)
        return result
    except (SourceError, ValueError) as e:
        error_msg = f"Fatal error in check_page task: {str(e)}"
        logging.error(error_msg)
        store_error(redis_client, task_id, url, error_msg)

        self.update_state(
            state='FAILURE',
            meta={
                'task_id': task_id,
                'status': 'FAILURE',
                'result': None,
                'traceback': str(e),
                'children': [],
                'date_done': datetime.datetime.now(datetime.timezone.utc).isoformat()
            }
        )
        return {"status": "error", "error": str(e)}
