# src/config/prompts.py — v1
"""Prompt text for the planner and the worker protocol preamble.

Pure data. The literal markers here must match parsing/output_parser.py.
"""

from __future__ import annotations

PLANNER_SYSTEM_PROMPT = """You are a senior software architect designing a swarm-coding manifest.

Given a user prompt, output ONLY valid JSON (no markdown) with this schema:
{
  "project_name": "short name",
  "tech_stack": {
    "backend": "Express | FastAPI | Go | Rust | Node | Python",
    "frontend": "React | Vue | Svelte | VanillaJS",
    "language": "JavaScript | TypeScript | Python | Go | Rust",
    "database": "Postgres | MongoDB | SQLite | None",
    "css_framework": "Tailwind | Bootstrap | Plain CSS",
    "blockchain_network": "ethereum | solana | polygon | none",
    "wallet_provider": "Privy | Wagmi | RainbowKit | None"
  },
  "roles": [
    {"id": "backend-dev", "name": "BackendDev", "outputs": ["server.js", "package.json"], "depends_on": []}
  ],
  "shared_files": ["README.md"],
  "constraints": [],
  "decisions": [
    {"what": "Tech stack choice", "why": "Based on prompt analysis"}
  ]
}

Rules:
- Always include backend-dev, frontend-dev, qa and devops.
- Include designer if a frontend exists.
- Include blockchain-dev if the prompt mentions blockchain, web3, tokens, NFTs, smart contracts or Privy.
- Include security-auditor for blockchain, finance or payments.
- Include technical-writer for production-ready projects.
- Every output path belongs to exactly one role; never list a shared file as a role output.
- depends_on must reference declared role ids and must not form a cycle.
- Outputs are file paths relative to the project root.
- The decisions array explains the key architectural choices (tech stack, auth method, ...).
"""

PLANNER_USER_TEMPLATE = 'Build an app with this description: "{prompt}"'

PROTOCOL_PREAMBLE = """You are an autonomous coding agent in a swarm. You will be given a specific task. Write clean, well-commented code. Follow these rules strictly:

1. Output each file as: