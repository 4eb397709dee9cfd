from polyhedron import describe, format_trace
from two_phase_simplex import LinearProgram, two_phase_simplex

EXAMPLES = {
    "2d": {
        "name": "2D Production Mix",
        "c": [70, 130],
        "A": [
            [12, 6],
            [0, 15],
            [2, 8],
            [0, 1],
        ],
        "b": [600, 300, 220, 10],
        "sense": ["<=", "<=", "<=", ">="],
    },
    "2d_mixed": {
        "name": "2D Mixed Constraints",
        "c": [5, 4],
        "A": [
            [1, 1],
            [1, 0],
            [0, 1],
        ],
        "b": [4, 3, 1],
        "sense": [">=", "<=", "="],
    },
    "3d": {
        "name": "3D Mixed Constraints",
        "c": [11, 9, 7],
        "A": [
            [3, 2, 1],
            [2, 5, 3],
            [4, 1, 2],
            [1, 3, 4],
            [2, 2, 5],
            [1, 1, 1],
            [1, 2, 1],
        ],
        "b": [24, 33, 28, 30, 32, 4, 6],
        "sense": ["<=", "<=", "<=", "<=", "<=", ">=", ">="],
    },
    "4d": {
        "name": "4D Resource Allocation",
        "c": [3, 2, 4, 1],
        "A": [
            [1, 1, 1, 1],
            [2, 0, 1, 0],
            [0, 1, 0, 2],
            [1, 0, 2, 1],
        ],
        "b": [10, 8, 9, 12],
        "sense": ["<=", "<=", "<=", "<="],
    },
}


def build_example(key, maximize=True):
    example = EXAMPLES[key]
    return LinearProgram.from_arrays(example["c"], example["A"], example["b"], example["sense"],
                                     maximize=maximize)


def _normalize(raw):
    return raw.strip().lower()


def _pick_example():
    keys = list(EXAMPLES)
    while True:
        print("Choose an example:")
        for i, key in enumerate(keys, start=1):
            marker = " (default)" if i == 1 else ""
            print(f"  {i}) {EXAMPLES[key]['name']}{marker}")
        raw = _normalize(input("> "))

        if raw in {"q", "quit", "exit"}:
            raise KeyboardInterrupt
        if raw == "":
            return keys[0]
        if raw.isdigit() and 0 <= int(raw) - 1 < len(keys):
            return keys[int(raw) - 1]
        if raw in EXAMPLES:
            return raw
        print("Invalid choice. Enter a number or an example key. Type q to quit.")


def run_showcase(key="2d", opts=None):
    problem = build_example(key)
    run = two_phase_simplex(problem, opts)
    payload = describe(run, opts)

    print(f"Running: {EXAMPLES[key]['name']}")
    print(f"Variables: {problem.dimension} | Constraints: {len(problem.constraints)}")
    print(f"Status: {run.status}")
    if run.x is not None:
        print("x* =", [round(float(v), 6) for v in run.x])
    if run.z is not None:
        print(f"z* = {run.z:.6g}")
    print(f"states = {run.step_count()} | vertices = {len(payload['vertices'])}")
    print()
    print(format_trace(run, explain=True))
    return payload


if __name__ == "__main__":
    try:
        run_showcase(_pick_example())
    except KeyboardInterrupt:
        print("\nCancelled.")
