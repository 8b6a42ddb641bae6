#!/usr/bin/env python3
import json
import os
import re
import subprocess
import tempfile
import shutil
import sys


def main() -> int:
    repo_dir = os.path.dirname(os.path.abspath(__file__))
    input_file = os.path.join(repo_dir, "test.json")
    script = os.path.join(repo_dir, "ascii_box_repair.py")

    if not os.path.isfile(input_file):
        print(f"test.json not found at {input_file}", file=sys.stderr)
        return 1
    if not os.path.isfile(script):
        print(f"ascii_box_repair.py not found at {script}", file=sys.stderr)
        return 1

    work_dir = None
    try:
        work_dir = tempfile.mkdtemp(prefix="ascii-box-repair-samples.")
        with open(input_file, "r", encoding="utf-8") as f:
            samples = json.load(f)

        if not samples:
            print("No samples found.", file=sys.stderr)
            return 1

        unchanged = 0
        for i, sample in enumerate(samples, start=1):
            title = sample.get("title") or f"Sample {i}"
            source = sample.get("source") or ""
            safe = re.sub(r"[^A-Za-z0-9._-]+", "_", title).strip("_")
            if not safe:
                safe = f"sample_{i}"
            path = os.path.join(work_dir, f"{i:03d}_{safe}.txt")
            with open(path, "w", encoding="utf-8") as f:
                f.write(source)

            print("=" * 80)
            print(f"[{i:03d}] {title}")
            print("-" * 80)
            print(source)
            print("-" * 80)
            subprocess.run([sys.executable, script, path], check=False)
            print()
            check = subprocess.run([sys.executable, script, path, "--check"], check=False)
            if check.returncode == 0:
                unchanged += 1

        print("=" * 80)
        print(f"Repaired {len(samples)} samples from {os.path.basename(input_file)}"
              f" ({unchanged} already clean)")
        print(f"Temporary files in: {work_dir}")
        return 0
    finally:
        if work_dir and os.path.isdir(work_dir):
            shutil.rmtree(work_dir)


if __name__ == "__main__":
    raise SystemExit(main())
