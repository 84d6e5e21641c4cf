"""Seed a running Notepress server with a few example posts.

Usage:
    uv run uvicorn notepress.main:app --port 8000

    # Then seed (sets the admin password if none exists yet):
    uv run python scripts/seed.py                                   # localhost:8000
    uv run python scripts/seed.py https://notes.example.com secret  # other host/password
"""

from __future__ import annotations

import asyncio
import sys

import httpx

BASE = sys.argv[1] if len(sys.argv) > 1 else "http://localhost:8000"
PASSWORD = sys.argv[2] if len(sys.argv) > 2 else "notepress"

POSTS = [
    {
        "title": "Sum of divisors is multiplicative",
        "description": "Why sigma(mn) = sigma(m) sigma(n) for coprime m, n",
        "category": "math",
        "difficulty": "medium",
        "tags": ["number-theory"],
        "content": (
            "# Claim\n"
            "For coprime $m, n$ we have $\\sigma(mn) = \\sigma(m)\\sigma(n)$.\n"
            "\n"
            "## Proof sketch\n"
            "1. Every divisor of $mn$ splits uniquely as $d_1 d_2$ with $d_1 | m$, $d_2 | n$.\n"
            "2. Sum over the pairs.\n"
            "\n"
            "$$\\sigma(mn) = \\sum_{d_1 | m} \\sum_{d_2 | n} d_1 d_2$$\n"
        ),
    },
    {
        "title": "Prefix sums",
        "description": "Constant-time range sum queries after linear preprocessing",
        "category": "cp",
        "difficulty": "easy",
        "tags": ["data-structures", "leetcode"],
        "content": (
            "## Idea\n"
            "Store running totals, answer each query with one subtraction.\n"
            "\n"
            "```cpp\n"
            "vector<long long> ps(n + 1);\n"
            "for (int i = 0; i < n; i++) ps[i + 1] = ps[i] + a[i];\n"
            "// sum of a[l..r] = ps[r + 1] - ps[l]\n"
            "```\n"
            "\n"
            "- build: $O(n)$\n"
            "- query: $O(1)$\n"
        ),
    },
    {
        "title": "Binary search on the answer",
        "description": "Turning an optimisation problem into a monotone predicate",
        "category": "cp",
        "difficulty": "hard",
        "tags": ["binary-search", "codeforces"],
        "content": (
            "When feasibility is monotone in $x$, search for the boundary.\n"
            "\n"
            "```python\n"
            "lo, hi = 0, 10**18\n"
            "while lo < hi:\n"
            "    mid = (lo + hi) // 2\n"
            "    if ok(mid):\n"
            "        hi = mid\n"
            "    else:\n"
            "        lo = mid + 1\n"
            "```\n"
        ),
    },
]


async def main():
    json_headers = {"Accept": "application/json", "Content-Type": "application/json"}
    async with httpx.AsyncClient(base_url=BASE, timeout=30, headers=json_headers) as client:
        status = (await client.get("/api/auth/check")).json()
        path = "/api/auth/login" if status["has_password"] else "/api/auth/setup"
        resp = await client.post(path, json={"password": PASSWORD})
        if resp.status_code != 200:
            print(f"  FAILED auth: {resp.status_code} {resp.text[:100]}")
            return

        for post in POSTS:
            resp = await client.post("/api/posts", json=post)
            if resp.status_code == 201:
                data = resp.json()
                print(f"  created {data['id']}  [{post['category']:4s}] {post['title'][:60]}")
            else:
                print(f"  FAILED {post['title']}: {resp.status_code} {resp.text[:100]}")


if __name__ == "__main__":
    print(f"\n--- Seeding {BASE} ---\n")
    asyncio.run(main())
