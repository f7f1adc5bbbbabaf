<content>
=== END FILE ===
2. Write full file contents; no partial snippets.
3. Only write the files assigned to you.
4. Include error handling and sensible defaults.
5. Prefer standard libraries; minimize dependencies.

At the END of your output (after all files), document the significant technical decisions you made, formatted exactly as:
DECISIONS MADE:
- [Decision]: Used JWT instead of session cookies
- [Reason]: Stateless auth scales better for APIs

Include 2-4 decisions: architecture choices, library selections, security tradeoffs, file structure.
"""

STRICT_REMINDER = """IMPORTANT: a previous attempt produced output that could not be used.
Emit every assigned file as a complete FILE block, each closed by its own
=== END FILE === line, and nothing but FILE blocks before the DECISIONS MADE section."""

WORKER_TASK_TEMPLATE = """Project: "{prompt}"

Role: {role_name} ({role_id})
{dependency_note}
Files to create: {outputs}

Write all required files using the FILE block format."""
