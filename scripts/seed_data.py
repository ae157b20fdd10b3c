#!/usr/bin/env python3
"""
Seed script: creates users and their todos via the API (no direct DB).
Run: API must be running.
  python scripts/seed_data.py
  python scripts/seed_data.py --users 20 --todos-per-user 15
"""

import argparse
import random

import httpx

API_BASE = "http://localhost:8000"

DESCRIPTIONS = [
    "Buy milk", "Pay electricity bill", "Book dentist appointment", "Renew passport",
    "Call the plumber", "Water the plants", "Write quarterly report", "Review pull requests",
    "Plan weekend trip", "Return library books", "Clean the garage", "Update CV",
    "Back up laptop", "Order birthday gift", "Schedule car service", "Read chapter 4",
]


def random_description() -> str:
    return random.choice(DESCRIPTIONS) + (" #" + str(random.randint(1, 999)) if random.random() > 0.5 else "")


def main():
    ap = argparse.ArgumentParser(description="Seed users and todos via API")
    ap.add_argument("--users", type=int, default=10, help="Number of users to create")
    ap.add_argument("--todos-per-user", type=int, default=20, help="Todos per user")
    ap.add_argument("--base-url", default=API_BASE, help="API base URL")
    args = ap.parse_args()

    created_todos = 0
    errors = []

    with httpx.Client(base_url=args.base_url, timeout=30.0) as client:
        print(f"Creating {args.users} users with {args.todos_per_user} todos each...")
        for i in range(args.users):
            email = f"user{i+1}@example.com"
            password = "password123"
            r = client.post("/users", json={"name": f"User {i+1}", "email": email, "password": password})
            if r.status_code == 400:
                # Probably already registered - log in instead
                r = client.post("/users/login", json={"email": email, "password": password})
            if r.status_code not in (200, 201):
                errors.append(f"User {email}: {r.status_code} {r.text[:80]}")
                continue

            headers = {"Authorization": f"Bearer {r.json()['token']}"}
            for _ in range(args.todos_per_user):
                r2 = client.post(
                    "/todos",
                    headers=headers,
                    json={"description": random_description(), "completed": random.random() < 0.3},
                )
                if r2.status_code == 201:
                    created_todos += 1
                else:
                    errors.append(f"Todo {email}: {r2.status_code}")
            # Leave no dangling seed sessions behind
            client.post("/users/logout", headers=headers)

    print(f"\nDone. Todos created: {created_todos}")
    if errors:
        print(f"Errors ({len(errors)}):")
        for e in errors[:15]:
            print("  ", e)
        if len(errors) > 15:
            print("  ... and", len(errors) - 15, "more")


if __name__ == "__main__":
    main()
