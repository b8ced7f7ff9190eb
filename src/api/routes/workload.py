"""Workload metric, summary and warning endpoints."""

from fastapi import APIRouter, Depends, Request

from api.dependencies import verify_api_key
from api.logging import logged_request
from api.models.requests import (
    DailyWorkloadRequest,
    RangeWorkloadRequest,
    SummaryRequest,
    WarningsRequest,
)
from api.models.responses import WorkloadMetricOut, WorkloadSummaryOut, WorkloadWarningOut
from services.classifier import classify_all
from services.workload import check_workload, daily_metric, period_summary, range_metrics

router = APIRouter(prefix="/v1/workload")


@router.post("/daily", response_model=WorkloadMetricOut)
async def daily_workload_endpoint(
    request: Request,
    body: DailyWorkloadRequest,
    _api_key: str = Depends(verify_api_key),
):
    with logged_request(request, "/v1/workload/daily") as request_log:
        entries = classify_all([e.to_entry() for e in body.entries])
        metric = daily_metric(body.date, entries, body.options.to_options())
        request_log.item_count = metric.event_count
        return WorkloadMetricOut.model_validate(metric)


@router.post("/range", response_model=list[WorkloadMetricOut])
async def range_workload_endpoint(
    request: Request,
    body: RangeWorkloadRequest,
    _api_key: str = Depends(verify_api_key),
):
    """One metric per day; an inverted date range is a 422."""
    with logged_request(request, "/v1/workload/range") as request_log:
        entries = classify_all([e.to_entry() for e in body.entries])
        metrics = range_metrics(body.start_date, body.end_date, entries, body.options.to_options())
        request_log.item_count = len(metrics)
        return [WorkloadMetricOut.model_validate(m) for m in metrics]


@router.post("/summary", response_model=WorkloadSummaryOut)
async def workload_summary_endpoint(
    request: Request,
    body: SummaryRequest,
    _api_key: str = Depends(verify_api_key),
):
    with logged_request(request, "/v1/workload/summary") as request_log:
        entries = classify_all([e.to_entry() for e in body.entries])
        summary = period_summary(body.period, entries, body.options.to_options(body.reference_date))
        request_log.item_count = summary.event_count
        return WorkloadSummaryOut.model_validate(summary)


@router.post("/warnings", response_model=list[WorkloadWarningOut])
async def workload_warnings_endpoint(
    request: Request,
    body: WarningsRequest,
    _api_key: str = Depends(verify_api_key),
):
    """Daily visit/hour and week-to-date hour warnings for one day."""
    with logged_request(request, "/v1/workload/warnings") as request_log:
        entries = classify_all([e.to_entry() for e in body.entries])
        warnings = check_workload(body.date, entries, body.options.to_options(), body.limits.to_limits())
        request_log.item_count = len(warnings)
        for warning in warnings:
            request_log.details.append(("warning", warning.message))
        return [WorkloadWarningOut.model_validate(w) for w in warnings]
