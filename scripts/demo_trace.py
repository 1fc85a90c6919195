from __future__ import annotations

from iterator_pattern.containers import MutationPolicy, make_container
from iterator_pattern.trace import traverse_with_trace


def main() -> None:
    for backing in ("array", "linked"):
        for policy in MutationPolicy:
            container = make_container(backing, mutation_policy=policy)
            container.extend(["Item 1", "Item 2"])

            cursor = container.create_iterator()
            # Appended after the cursor exists: only LIVE cursors see it
            container.add("Item 3")

            print(f"\n{backing} / {policy.value}")
            for step in traverse_with_trace(cursor):
                more = "*" if step.has_next_after else " "
                print(f"  [{step.position}] {step.item:<8s} {more}")


if __name__ == "__main__":
    main()
