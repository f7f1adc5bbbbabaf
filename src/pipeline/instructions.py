# src/pipeline/instructions.py — v1
"""Build the message list sent to a worker for one role.

System message: protocol preamble + role guidance. User message: the
project prompt, the role, what it builds on, and the files to write.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass

from swarmcoder.config.prompts import PROTOCOL_PREAMBLE, STRICT_REMINDER, WORKER_TASK_TEMPLATE
from swarmcoder.config.roles import GENERIC_GUIDANCE, ROLE_GUIDANCE
from swarmcoder.core.models import Manifest, Role
from swarmcoder.llm.models import Message


@dataclass(frozen=True)
class Instruction:
    """Messages for one worker call, plus whether generic guidance was used."""

    messages: list[Message]
    generic_guidance: bool = False


def render_guidance(role: Role, manifest: Manifest) -> tuple[str, bool]:
    """Format the guidance template for a role.

    Returns:
        (guidance text, True if the role id has no dedicated template)
    """
    template = ROLE_GUIDANCE.get(role.id)
    generic = template is None
    values: defaultdict[str, str] = defaultdict(lambda: "n/a")
    values.update({k: str(v) for k, v in manifest.tech_stack.items()})
    values["files"] = ", ".join(role.outputs) or "none declared"
    return (template or GENERIC_GUIDANCE).format_map(values), generic


def dependency_note(role: Role, manifest: Manifest) -> str:
    if not role.depends_on:
        return "You are starting from scratch; no other role has run before you."
    parts = []
    for dep_id in role.depends_on:
        dep = manifest.get_role(dep_id)
        parts.append(f"{dep.name} ({', '.join(dep.outputs) or 'no files'})")
    return "Builds on work already completed by: " + "; ".join(parts) + "."


def build_instruction(
    role: Role,
    manifest: Manifest,
    prompt: str,
    strict: bool = False,
) -> Instruction:
    """Assemble the worker messages for a role.

    Args:
        role: Role being invoked.
        manifest: Manifest the role belongs to.
        prompt: The user's project description.
        strict: Append the stricter protocol reminder (retry attempts).
    """
    guidance, generic = render_guidance(role, manifest)
    system = f"{PROTOCOL_PREAMBLE}\n{guidance}"
    if manifest.constraints:
        system += "\n\nProject constraints:\n" + "\n".join(f"- {c}" for c in manifest.constraints)
    if strict:
        system += f"\n\n{STRICT_REMINDER}"

    task = WORKER_TASK_TEMPLATE.format(
        prompt=prompt,
        role_name=role.name,
        role_id=role.id,
        dependency_note=dependency_note(role, manifest),
        outputs=", ".join(role.outputs) or "none declared",
    )
    return Instruction(
        messages=[Message(role="system", content=system), Message(role="user", content=task)],
        generic_guidance=generic,
    )
