"""Azure Functions app for scheduled Clockify OOO calendar sync."""

import json
import logging

import azure.functions as func
import httpx

from ooosync.clockify.client import ClockifyAPIError
from ooosync.clockify.filter import SourceResponseError
from ooosync.core.config import SetupError
from ooosync.sync import SyncEvent, load_default_sync_event, run

app = func.FunctionApp()


def _summarize(report) -> dict:
    summary = {"mode": report.mode, "requests": report.requests}
    if report.result is not None:
        summary.update(
            inserted=report.result.inserted,
            skipped=report.result.skipped,
            would_insert=report.result.would_insert,
            errors=report.result.errors,
        )
    return summary


@app.function_name(name="ooo_sync_timer")
@app.timer_trigger(schedule="0 0 * * * *", arg_name="timer", run_on_startup=False)
def ooo_sync_timer(timer: func.TimerRequest) -> None:
    """Timer trigger for the hourly OOO sync.

    Runs at the top of every hour.
    CRON: 0 0 * * * *
    Window and filters come from OOO_SYNC_* app settings.
    """
    logging.info("OOO sync triggered")

    if timer.past_due:
        logging.info("Timer is past due, running sync anyway")

    event = load_default_sync_event()

    try:
        report = run(event, echo=logging.info)
    except Exception as e:
        logging.error(f"OOO sync failed: {e}")
        raise

    summary = _summarize(report)
    if summary.get("errors"):
        logging.warning(f"OOO sync finished with errors: {json.dumps(summary)}")
    else:
        logging.info(f"OOO sync complete: {json.dumps(summary)}")


@app.function_name(name="ooo_sync_http")
@app.route(route="ooo_sync", methods=["POST"])
def ooo_sync_http(req: func.HttpRequest) -> func.HttpResponse:
    """HTTP trigger running a sync with an explicit event body.

    Body (all optional except as required by the chosen mode):
        {"start", "end", "createdStart", "createdEnd", "statuses", "by", "pageSize"}
    """
    logging.info("OOO sync HTTP request received")

    try:
        event = SyncEvent.from_json(req.get_body())
        report = run(event, echo=logging.info)
    except SetupError as e:
        logging.error(f"Invalid OOO sync request: {e}")
        return func.HttpResponse(str(e), status_code=400)
    except (ClockifyAPIError, httpx.HTTPError, SourceResponseError) as e:
        logging.error(f"Clockify fetch failed: {e}")
        return func.HttpResponse(str(e), status_code=502)

    return func.HttpResponse(
        json.dumps(_summarize(report)),
        status_code=200,
        mimetype="application/json",
    )
