"""AI prompts for the advisory client.

Contains prompts for project risk analysis, smart remarks and regional reports.
"""

# ---------------------------------------------------------------------------
# Project Risk Analysis
# ---------------------------------------------------------------------------

RISK_ANALYSIS_SYSTEM = """You are a construction monitoring analyst for public school infrastructure projects. You review project status data and give short, practical risk assessments to program managers."""

RISK_ANALYSIS_USER = """Analyze the following construction project status and provide a brief risk assessment (max 150 words).
Focus on the timeline (Target vs Actual/Current Date), accomplishment percentage, and status.
Identify if the project is delayed, on track, or ahead, and suggest 1 key action item.

Project Data:
- Project: {project_name}
- School: {school_name}
- Allocation: {allocation}
- Contractor: {contractor_name}
- Notice to Proceed: {notice_to_proceed}
- Target Completion: {target_completion_date}
- Current Status: {status}
- Accomplishment: {accomplishment}%
- Status As Of: {status_as_of_date}
- Remarks: {remarks}
- Today's Date: {today}"""

# ---------------------------------------------------------------------------
# Smart Remarks
# ---------------------------------------------------------------------------

SMART_REMARKS_SYSTEM = """You write concise status remarks for construction project reports. Reply with the remark only."""

SMART_REMARKS_USER = """Generate a concise, professional "Other Remarks" update for a construction project report based on this data:
Status: {status}
Accomplishment: {accomplishment}%
Target Date: {target_completion_date}

Keep it under 20 words."""

# ---------------------------------------------------------------------------
# Regional Report
# ---------------------------------------------------------------------------

REGIONAL_REPORT_SYSTEM = """You are a senior program officer preparing executive summaries of school infrastructure programs for regional directors. Write in clear, formal English using markdown headings (##, ###) and bullet lists."""

REGIONAL_REPORT_USER = """Prepare an executive summary report for {region} covering {project_count} school infrastructure projects.

Include:
1. Overall progress and total allocation ({total_allocation})
2. Projects that are delayed or at risk, with reasons where the data suggests them
3. Notable completions
4. Recommended actions for the regional office

Today's Date: {today}

--- PROJECT DATA ---
{project_lines}
--- END PROJECT DATA ---"""

REGIONAL_REPORT_LINE = "- {school_name} | {project_name} | {status} | {accomplishment}% | Allocation {allocation} | Target {target_completion_date} | Contractor {contractor_name} | Remarks: {remarks}"
