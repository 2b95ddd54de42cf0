#!/usr/bin/env python3
"""Benchmark authorize: latency (p50, p95, p99) and QPS on one shared item.

Usage:
  export API_URL=http://localhost:8000 KEYCLOAK_URL=http://localhost:8080
  export KEYCLOAK_CLIENT_SECRET=... BENCH_USER=testuser BENCH_PASSWORD=testpass
  python scripts/bench_authorize.py [--collaborators 50] [--num-checks 500]

The bench user registers as creator of a fresh item, invites the requested
number of collaborators, stages and commits a bulk role change, then measures
authorize calls.
"""
from __future__ import annotations

import argparse
import os
import statistics
import sys
import time
import uuid

import httpx


def get_token(
    keycloak_url: str,
    realm: str,
    client_id: str,
    client_secret: str,
    username: str,
    password: str,
) -> str:
    url = f"{keycloak_url.rstrip('/')}/realms/{realm}/protocol/openid-connect/token"
    r = httpx.post(
        url,
        data={
            "grant_type": "password",
            "client_id": client_id,
            "client_secret": client_secret,
            "username": username,
            "password": password,
        },
        headers={"Content-Type": "application/x-www-form-urlencoded"},
        timeout=30.0,
    )
    r.raise_for_status()
    return r.json()["access_token"]


def percentile(sorted_values: list[float], pct: float) -> float:
    index = max(0, min(len(sorted_values) - 1, int(len(sorted_values) * pct) - 1))
    return sorted_values[index]


def main() -> int:
    parser = argparse.ArgumentParser(description="Benchmark authorize")
    parser.add_argument("--collaborators", type=int, default=20, help="Collaborators to invite")
    parser.add_argument("--num-checks", type=int, default=200, help="Number of authorize requests")
    parser.add_argument("--output", type=str, default="bench_authorize.txt", help="Output file path")
    args = parser.parse_args()

    api_url = os.environ.get("API_URL", "http://localhost:8000").rstrip("/")
    keycloak_url = os.environ.get("KEYCLOAK_URL", "http://localhost:8080")
    realm = os.environ.get("KEYCLOAK_REALM", "collabrbac")
    client_id = os.environ.get("KEYCLOAK_CLIENT_ID", "collabrbac-api")
    client_secret = os.environ.get("KEYCLOAK_CLIENT_SECRET", "")
    user = os.environ.get("BENCH_USER", "testuser")
    password = os.environ.get("BENCH_PASSWORD", "testpass")

    print("Getting token...")
    token = get_token(keycloak_url, realm, client_id, client_secret, user, password)
    headers = {"Authorization": f"Bearer {token}", "Content-Type": "application/json"}
    item = f"{api_url}/v1/items/bench-{uuid.uuid4()}"

    with httpx.Client(timeout=60.0) as client:
        client.post(f"{item}/collaborators", json={"role": "creator"}, headers=headers).raise_for_status()
        collaborator_ids = [f"bench-collab-{i}" for i in range(args.collaborators)]
        print(f"Inviting {args.collaborators} collaborators...")
        for cid in collaborator_ids:
            client.post(
                f"{item}/collaborators",
                json={"collaborator_id": cid, "role": "viewer"},
                headers=headers,
            ).raise_for_status()

        t0 = time.perf_counter()
        client.post(
            f"{item}/pending",
            json={"collaborator_ids": collaborator_ids, "role": "collaborator", "duration": "7d"},
            headers=headers,
        ).raise_for_status()
        r = client.post(f"{item}/pending/commit", headers=headers)
        r.raise_for_status()
        commit_ms = (time.perf_counter() - t0) * 1000
        print(f"Bulk commit: {len(r.json()['succeeded'])} applied in {commit_ms:.1f} ms")

    latencies: list[float] = []
    errors = 0
    print(f"Running {args.num_checks} authorize requests...")
    start_total = time.perf_counter()
    with httpx.Client(timeout=30.0) as client:
        for i in range(args.num_checks):
            t0 = time.perf_counter()
            r = client.post(
                f"{item}/authorize",
                json={
                    "permission": "complete" if i % 2 else "edit",
                    "item_type": "milestone",
                    "assigned_collaborator_ids": [],
                },
                headers=headers,
            )
            elapsed = time.perf_counter() - t0
            if r.status_code == 200:
                latencies.append(elapsed)
            else:
                errors += 1
    total_elapsed = time.perf_counter() - start_total

    n = len(latencies)
    if n == 0:
        print("No successful authorize calls.")
        return 1

    ordered = sorted(latencies)
    summary = (
        f"Authorize benchmark (collaborators={args.collaborators}, checks={n}, errors={errors})\n"
        f"  QPS: {n / total_elapsed:.2f}\n"
        f"  Latency: p50={statistics.median(latencies) * 1000:.1f} ms, "
        f"p95={percentile(ordered, 0.95) * 1000:.1f} ms, "
        f"p99={percentile(ordered, 0.99) * 1000:.1f} ms\n"
        f"  Bulk commit: {commit_ms:.1f} ms\n"
        f"  Total time: {total_elapsed:.2f} s\n"
    )
    print(summary)

    try:
        os.makedirs(os.path.dirname(args.output) or ".", exist_ok=True)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(summary)
        print(f"Wrote {args.output}")
    except OSError as e:
        print(f"Could not write {args.output}: {e}", file=sys.stderr)

    return 0


if __name__ == "__main__":
    sys.exit(main())
