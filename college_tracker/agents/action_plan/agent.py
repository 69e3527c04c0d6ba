"""
Action Plan Agent - the dashboard's AI "priority of the day"
"""
from college_tracker.agents.base_agent import BaseAgent
from college_tracker.agents.action_plan.prompts import SYSTEM_PROMPT, ACTION_PLAN_PROMPT
from typing import Dict, Any


class ActionPlanAgent(BaseAgent):
    """
    Turns the dashboard summary counts into a short, motivating plan
    """

    def __init__(self):
        super().__init__(name="ActionPlanAgent")

    async def process(self, context: Dict[str, Any]) -> Dict[str, Any]:
        plan = await self.generate_action_plan(context)
        return {"plan": plan}

    async def generate_action_plan(self, summary: Dict[str, Any]) -> str:
        next_tasks = summary.get("upcoming_tasks") or []
        days = summary.get("days_to_next_deadline")

        prompt = ACTION_PLAN_PROMPT.format(
            colleges=summary.get("colleges", 0),
            progress=summary.get("overall_progress", 0),
            pending_tasks=summary.get("tasks_pending", 0),
            overdue_tasks=summary.get("tasks_overdue", 0),
            essays_pending=summary.get("essays_total", 0) - summary.get("essays_completed", 0),
            days_to_deadline=days if days is not None else "no deadline set",
            next_tasks=", ".join(t["title"] for t in next_tasks[:3]) or "none",
        )

        return await self.generate_response(prompt=prompt, system_prompt=SYSTEM_PROMPT)
