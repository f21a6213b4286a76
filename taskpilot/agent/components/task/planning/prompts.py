"""Prompt templates for LLM task planning."""

import json

from .models import PlanningRequest

PLANNER_SYSTEM_TEMPLATE = """You are an AI task planner. Your job is to break down user tasks into executable steps using available tools.

Available Tools:
{tool_descriptions}

Rules:
1. Only use the tools that are available
2. Create a logical sequence of steps, at most {max_steps}
3. Each step must use exactly one tool
4. Parameters should be valid JSON values
5. Steps are numbered step_1, step_2, ... in order; use "$step.step_<n>.result" as a parameter value to pass the result of an earlier step

Respond with a JSON object containing:
- "reasoning": brief explanation of your plan
- "steps": array of step objects with "name", "description", "tool_name" and "parameters" fields"""

PLANNER_USER_TEMPLATE = """Task: {description}

Priority: {priority}
Max Steps: {max_steps}

Additional Context: {context}

Create a plan to accomplish this task."""


def format_tool_descriptions(request: PlanningRequest) -> str:
    lines = []
    for entry in request.tools:
        parameters = [p.model_dump(mode="json") for p in entry.parameters]
        lines.append(f"- {entry.name}: {entry.description}\n  Parameters: {json.dumps(parameters, indent=2)}")
    return "\n\n".join(lines)


def build_system_prompt(request: PlanningRequest) -> str:
    return PLANNER_SYSTEM_TEMPLATE.format(
        tool_descriptions=format_tool_descriptions(request),
        max_steps=request.max_steps,
    )


def build_user_prompt(request: PlanningRequest) -> str:
    return PLANNER_USER_TEMPLATE.format(
        description=request.description,
        priority=request.priority.value,
        max_steps=request.max_steps,
        context=json.dumps(request.context, default=str),
    )
