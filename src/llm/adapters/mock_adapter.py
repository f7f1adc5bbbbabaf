# src/llm/adapters/mock_adapter.py — v1
"""Offline mock adapter returning canned responses (no API calls).

The planner prompt gets a fixed five-role manifest; every worker prompt
gets the same block of FILE segments covering all of that manifest's
outputs. Assembly only copies each role's declared outputs, so the
extra files a role receives stay in its own directory.
"""

from __future__ import annotations

import json
from typing import Any

from swarmcoder.llm.base_client import BaseLLMClient
from swarmcoder.llm.models import LLMResponse, Message
from swarmcoder.parsing.output_parser import format_file_block

PLANNER_MARKER = "senior software architect"

MOCK_MANIFEST: dict[str, Any] = {
    "project_name": "Privy Dashboard",
    "tech_stack": {
        "backend": "Express",
        "frontend": "React",
        "language": "JavaScript",
        "database": "None",
        "css_framework": "Plain CSS",
        "blockchain_network": "ethereum",
        "wallet_provider": "Privy",
    },
    "roles": [
        {"id": "backend-dev", "name": "BackendDev",
         "outputs": ["server.js", "package.json"], "depends_on": []},
        {"id": "frontend-dev", "name": "FrontendDev",
         "outputs": ["public/index.html", "styles.css", "app.js"],
         "depends_on": ["backend-dev"]},
        {"id": "blockchain-dev", "name": "BlockchainDev",
         "outputs": ["privy-config.js"], "depends_on": ["backend-dev"]},
        {"id": "qa", "name": "QAEngineer",
         "outputs": ["test/api.test.js"], "depends_on": ["backend-dev", "frontend-dev"]},
        {"id": "devops", "name": "DevOps",
         "outputs": ["Dockerfile", "docker-compose.yml"], "depends_on": ["qa"]},
    ],
    "shared_files": ["README.md"],
    "constraints": [],
}

MOCK_FILES: dict[str, str] = {
    "server.js": (
        "const express = require('express');\n"
        "const app = express();\n"
        "app.use(express.static('public'));\n"
        "app.get('/api/balance', (req, res) => res.json({ balance: 100 }));\n"
        "app.listen(3001, () => console.log('Listening on 3001'));"
    ),
    "package.json": json.dumps(
        {
            "name": "privy-dashboard",
            "version": "1.0.0",
            "main": "server.js",
            "scripts": {"start": "node server.js"},
            "dependencies": {"express": "^4.18.2"},
        },
        indent=2,
    ),
    "public/index.html": (
        "<!DOCTYPE html><html><head><title>Privy Dashboard</title></head>"
        "<body><h1>Token Balance: <span id=\"bal\">...</span></h1></body></html>"
    ),
    "styles.css": "body { font-family: sans-serif; padding: 20px; background: #111; color: #eee; }",
    "app.js": "console.log('Frontend loaded');",
    "privy-config.js": "console.log('Privy integration would go here');",
    "test/api.test.js": (
        "const request = require('supertest');\n"
        "const app = require('../server');\n"
        "describe('GET /api/balance', () => {\n"
        "  it('returns 200', async () => { await request(app).get('/api/balance').expect(200); });\n"
        "});"
    ),
    "Dockerfile": (
        "FROM node:18-alpine\nWORKDIR /app\nCOPY package*.json ./\n"
        "RUN npm install\nCOPY . .\nCMD [\"node\", \"server.js\"]"
    ),
    "docker-compose.yml": (
        "version: '3.8'\nservices:\n  app:\n    build: .\n    ports: [\"3001:3001\"]"
    ),
}

MOCK_DECISIONS = (
    "DECISIONS MADE:\n"
    "- [Decision]: Served the frontend as static files from Express\n"
    "- [Reason]: One process keeps the local setup simple\n"
)


def mock_worker_output() -> str:
    """Canned worker response in FILE-block protocol form."""
    blocks = [format_file_block(path, content) for path, content in MOCK_FILES.items()]
    return "\n\n".join(blocks) + "\n\n" + MOCK_DECISIONS


class MockAdapter(BaseLLMClient):
    """Canned-response adapter for offline runs and tests."""

    def __init__(self, model: str = "mock", **kwargs: Any) -> None:
        self._model = model
        self.calls: list[list[Message]] = []

    async def complete(
        self,
        messages: list[Message],
        max_tokens: int = 4096,
        temperature: float = 0.3,
    ) -> LLMResponse:
        self.calls.append(list(messages))
        is_planner = bool(messages) and messages[0].role == "system" and (
            PLANNER_MARKER in messages[0].content
        )
        content = json.dumps(MOCK_MANIFEST, indent=2) if is_planner else mock_worker_output()
        return LLMResponse(content=content, model=self._model, provider="mock")

    @property
    def provider_name(self) -> str:
        return "mock"
