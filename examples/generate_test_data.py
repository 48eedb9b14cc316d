import json
import os
import random

LANGUAGES = ["Python", "R", "C++", None]
TOPICS = ["data", "columnar", "json", "analytics", "arrow", "tidy"]


def make_repo(idx):
    repo = {
        "id": idx,
        "name": f"repo-{idx}",
        "owner": {"login": f"user{idx % 7}", "id": 1000 + idx % 7},
        "language": random.choice(LANGUAGES),
        "topics": random.sample(TOPICS, random.randint(0, 3)),
    }
    if idx % 5 == 0:
        # Some APIs return counters as strings
        repo["stars"] = str(random.randint(0, 5000))
    else:
        repo["stars"] = random.randint(0, 5000)
    return repo


if __name__ == "__main__":
    os.makedirs("data", exist_ok=True)
    with open("data/repos.json", "w") as f:
        json.dump([make_repo(i) for i in range(100)], f, indent=2)
