# src/config/roles.py — v1
"""Role guidance templates, keyed by role id.

Each template is formatted with the manifest's tech stack plus ``files``
(the role's declared outputs). Unknown stack keys render as "n/a".
"""

from __future__ import annotations

GENERIC_GUIDANCE = "Implement your assigned files according to the manifest.\nFiles: {files}."

ROLE_GUIDANCE: dict[str, str] = {
    "backend-dev": """Create the backend API.
Tech: {backend} ({language})
Files to create: {files}.

If the wallet provider is Privy ({wallet_provider}), include routes for authentication callbacks and token verification.
Provide a simple health endpoint GET /health.
Use CORS appropriately.
Include a sample .env.example if needed.""",
    "frontend-dev": """Create the frontend UI.
Tech: {frontend} with {css_framework}.
Files: {files}.

Use fetch to call the backend API. Integrate the wallet provider ({wallet_provider}) when one is set.
Implement a clean, responsive layout.
Add a health indicator showing backend reachability.""",
    "designer": """Design assets and styles.
Files: {files}.

Define a design system: colors, spacing, typography.
Create reusable CSS classes, or a Tailwind config when Tailwind is used ({css_framework}).
Design components: Button, Card, Header, Footer.
Focus on accessibility and mobile-first layouts.""",
    "blockchain-dev": """Blockchain integration.
Files: {files}.

Network: {blockchain_network}.
Wallet: {wallet_provider}.

Add the wallet auth flow (login button, session handling) and backend signature verification.
Write a sample smart contract if tokens or NFTs are relevant, plus a deploy script.
Document the environment variables needed (provider keys, RPC URLs).""",
    "security-auditor": """Review the codebase for security issues.
Files: {files}.

Scan for common vulnerabilities (injection, XSS, reentrancy, insecure dependencies).
Add security headers, rate limiting and input validation where missing.
Check secret handling in the wallet integration.
Write SECURITY.md with findings and recommendations.""",
    "qa": """Write automated tests.
Files: {files}.

Test at least 2 API endpoints and 1 blockchain interaction if present.
Include setup/teardown and mocking.
Add an integration test that starts the server and exercises it.""",
    "technical-writer": """Documentation.
Files: {files}.

Write a README with setup, run, test and deploy sections.
Document the API endpoints.
Include a troubleshooting section.
Keep the tone friendly and concise.""",
    "devops": """Deployment and CI/CD.
Files: {files}.

Create a multi-stage Dockerfile and a docker-compose.yml with all services.
Add a CI workflow that runs tests on pull requests and builds the image.
Manage environment variables with dotenv.
Ensure health checks and logs.""",
}
