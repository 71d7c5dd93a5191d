"""AI advisory routes.

Endpoints:
  POST   /api/projects/{projectId}/ai/risk      — Risk assessment for one project
  POST   /api/projects/{projectId}/ai/remarks   — Suggested "Other Remarks"
  POST   /api/ai/regional-report                — Executive summary for a region

Advisory failures come back as fallback text with status 200. A second request
for the same project (or region) while one is outstanding gets 409.
"""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool

from insighted.dependencies import get_advisory_guard, get_project_or_404, get_store
from insighted.schemas.project import Project, RegionalReportRequest
from insighted.services import advisory
from insighted.services.advisory import AdvisoryGuard
from insighted.services.errors import AdvisoryBusyError
from insighted.services.store import ProjectStore

router = APIRouter(tags=["advisory"])


def _busy() -> HTTPException:
    return HTTPException(status_code=409, detail="An AI request for this item is already in progress")


@router.post("/projects/{project_id}/ai/risk")
async def project_risk(
    project: Project = Depends(get_project_or_404),
    guard: AdvisoryGuard = Depends(get_advisory_guard),
):
    try:
        analysis = await guard.run(f"risk:{project.id}", advisory.analyze_project_risk, project)
    except AdvisoryBusyError:
        raise _busy()
    return {"data": {"projectId": project.id, "projectName": project.project_name, "analysis": analysis}}


@router.post("/projects/{project_id}/ai/remarks")
async def project_remarks(
    project: Project = Depends(get_project_or_404),
    guard: AdvisoryGuard = Depends(get_advisory_guard),
):
    """Suggest remarks; an empty string means no suggestion is available."""
    try:
        remarks = await guard.run(f"remarks:{project.id}", advisory.generate_smart_remarks, project)
    except AdvisoryBusyError:
        raise _busy()
    return {"data": {"projectId": project.id, "remarks": remarks}}


@router.post("/ai/regional-report")
async def regional_report(
    body: RegionalReportRequest,
    store: ProjectStore = Depends(get_store),
    guard: AdvisoryGuard = Depends(get_advisory_guard),
):
    projects = await run_in_threadpool(store.list_all)
    region_projects = [p for p in projects if p.region == body.region]
    if not region_projects:
        raise HTTPException(
            status_code=404,
            detail=f"No projects found for {body.region}. Cannot generate report.",
        )

    try:
        report = await guard.run(
            f"report:{body.region}", advisory.generate_regional_report, body.region, region_projects
        )
    except AdvisoryBusyError:
        raise _busy()
    return {"data": {"region": body.region, "projectCount": len(region_projects), "report": report}}
