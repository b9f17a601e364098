"""
String Queue Demo -- Ordering laws, bounded removal, per-operation cost,
reverse/sort scaling and sort behaviour across input shapes.

Generates:
- viz/*.png -- Individual visualization files
- report.pdf -- Comprehensive PDF report
"""

import sys
import time
import random
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))
from string_queue import Queue, OutputBuffer

SEED = 42
np.random.seed(SEED)

SIZES = [1_000, 2_000, 4_000, 8_000, 16_000, 32_000]
REPEATS = 3
WORD_LENGTH = 8

VIZ_DIR = Path(__file__).parent / "viz"
VIZ_DIR.mkdir(exist_ok=True)
REPORT_PATH = Path(__file__).parent / "report.pdf"

COLORS = {
    "blue": "#3498db",
    "red": "#e74c3c",
    "orange": "#f39c12",
    "green": "#27ae60",
    "purple": "#9b59b6",
    "dark": "#2c3e50",
}


def random_words(n, length=WORD_LENGTH, seed=SEED):
    rng = np.random.default_rng(seed)
    letters = np.array(list("abcdefghijklmnopqrstuvwxyz"))
    picks = rng.integers(0, len(letters), size=(n, length))
    return ["".join(row) for row in letters[picks]]


def build_queue(words):
    q = Queue()
    for w in words:
        q.insert_tail(w)
    return q


def drain(q, capacity=64):
    buf = OutputBuffer(capacity)
    out = []
    while q.remove_head(buf):
        out.append(buf.text())
    return out


def best_of(fn, repeats=REPEATS):
    """Minimum wall time of fn() over several runs, in seconds."""
    times = []
    for _ in range(repeats):
        start = time.perf_counter()
        fn()
        times.append(time.perf_counter() - start)
    return min(times)


def loglog_slope(sizes, seconds):
    slope, _ = np.polyfit(np.log(sizes), np.log(seconds), 1)
    return slope


# ---------------------------------------------------------------------------
# Example 1: Ordering Laws
# ---------------------------------------------------------------------------
def example_1_ordering_laws():
    """FIFO, LIFO and sort scenarios on a handful of values."""
    print("=" * 60)
    print("Example 1: Ordering Laws")
    print("=" * 60)

    q = Queue()
    for v in ["a", "b", "c"]:
        q.insert_tail(v)
    fifo = drain(q)
    print(f"  insert_tail a,b,c -> remove_head x3: {fifo}")

    for v in ["a", "b", "c"]:
        q.insert_head(v)
    lifo = drain(q)
    print(f"  insert_head a,b,c -> remove_head x3: {lifo}")

    for v in ["c", "a", "b"]:
        q.insert_tail(v)
    q.sort()
    sorted_out = drain(q)
    print(f"  insert_tail c,a,b -> sort -> remove_head x3: {sorted_out}")

    assert fifo == ["a", "b", "c"]
    assert lifo == ["c", "b", "a"]
    assert sorted_out == ["a", "b", "c"]

    print(f"  empty queue: size={q.size()}, remove_head={q.remove_head()}")
    q.reverse()
    q.sort()
    print()
    return []


# ---------------------------------------------------------------------------
# Example 2: Bounded Removal
# ---------------------------------------------------------------------------
def example_2_bounded_removal():
    """Show truncation of one value into buffers of growing capacity."""
    print("=" * 60)
    print("Example 2: Bounded Removal")
    print("=" * 60)

    value = "truncation"
    capacities = list(range(0, len(value) + 3))
    copied = []
    for cap in capacities:
        q = Queue()
        q.insert_tail(value)
        buf = OutputBuffer(cap)
        q.remove_head(buf)
        text = buf.text()
        copied.append(len(text))
        print(f"  capacity {cap:2d}: {text!r}")

    fig, ax = plt.subplots(figsize=(9, 5))
    ax.plot(capacities, copied, "o-", color=COLORS["blue"], label="bytes copied")
    ax.plot(capacities, [max(c - 1, 0) for c in capacities], "--",
            color=COLORS["orange"], label="capacity - 1")
    ax.axhline(len(value), color=COLORS["dark"], linestyle=":", label="value length")
    ax.set_xlabel("Buffer capacity")
    ax.set_ylabel("Bytes copied")
    ax.set_title("remove_head copies at most capacity - 1 bytes\nthen always terminates",
                 fontsize=11, fontweight="bold")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    path = VIZ_DIR / "02_bounded_removal.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    print()
    return [path]


# ---------------------------------------------------------------------------
# Example 3: Constant-Time Operations
# ---------------------------------------------------------------------------
def example_3_constant_time():
    """Per-operation cost of insert_tail, size and remove_head vs n."""
    print("=" * 60)
    print("Example 3: Constant-Time Operations")
    print("=" * 60)

    results = {"insert_tail": [], "size": [], "remove_head": []}
    for n in SIZES:
        words = random_words(n)

        def fill():
            build_queue(words)

        results["insert_tail"].append(best_of(fill) / n)

        q = build_queue(words)
        results["size"].append(best_of(lambda: [q.size() for _ in range(n)]) / n)

        def empty_out():
            target = build_queue(words)
            start = time.perf_counter()
            while target.remove_head():
                pass
            return time.perf_counter() - start

        results["remove_head"].append(min(empty_out() for _ in range(REPEATS)) / n)

        print(f"  n={n:6d}: insert_tail {results['insert_tail'][-1] * 1e9:7.1f} ns/op, "
              f"size {results['size'][-1] * 1e9:7.1f} ns/op, "
              f"remove_head {results['remove_head'][-1] * 1e9:7.1f} ns/op")

    fig, ax = plt.subplots(figsize=(10, 6))
    for (name, per_op), color in zip(results.items(),
                                     [COLORS["blue"], COLORS["green"], COLORS["red"]]):
        slope = loglog_slope(SIZES, per_op)
        ax.plot(SIZES, np.array(per_op) * 1e9, "o-", color=color,
                label=f"{name} (slope {slope:+.2f})")
    ax.set_xscale("log")
    ax.set_xlabel("Queue size n")
    ax.set_ylabel("ns per operation")
    ax.set_title("Per-operation cost stays flat as n grows",
                 fontsize=11, fontweight="bold")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    path = VIZ_DIR / "03_constant_time.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    print()
    return [path]


# ---------------------------------------------------------------------------
# Example 4: Reverse and Sort Scaling
# ---------------------------------------------------------------------------
def example_4_scaling():
    """Whole-queue cost of reverse (O(n)) and sort (O(n log n))."""
    print("=" * 60)
    print("Example 4: Reverse and Sort Scaling")
    print("=" * 60)

    reverse_t, sort_t = [], []
    for n in SIZES:
        words = random_words(n)
        q = build_queue(words)
        reverse_t.append(best_of(q.reverse))

        def sort_fresh():
            target = build_queue(words)
            start = time.perf_counter()
            target.sort()
            return time.perf_counter() - start

        sort_t.append(min(sort_fresh() for _ in range(REPEATS)))
        print(f"  n={n:6d}: reverse {reverse_t[-1] * 1e3:8.3f} ms, "
              f"sort {sort_t[-1] * 1e3:8.3f} ms")

    rev_slope = loglog_slope(SIZES, reverse_t)
    sort_slope = loglog_slope(SIZES, sort_t)
    print(f"  log-log slope: reverse {rev_slope:.2f}, sort {sort_slope:.2f}")

    sizes = np.array(SIZES, dtype=float)
    nlogn = sizes * np.log2(sizes)
    nlogn_ref = nlogn / nlogn[0] * sort_t[0]
    linear_ref = sizes / sizes[0] * reverse_t[0]

    fig, axes = plt.subplots(1, 2, figsize=(14, 6))
    axes[0].loglog(sizes, reverse_t, "o-", color=COLORS["blue"],
                   label=f"reverse (slope {rev_slope:.2f})")
    axes[0].loglog(sizes, linear_ref, "--", color=COLORS["dark"], label="O(n) reference")
    axes[0].set_title("reverse: in-place relinking", fontsize=11, fontweight="bold")
    axes[1].loglog(sizes, sort_t, "o-", color=COLORS["purple"],
                   label=f"sort (slope {sort_slope:.2f})")
    axes[1].loglog(sizes, nlogn_ref, "--", color=COLORS["dark"], label="O(n log n) reference")
    axes[1].set_title("sort: linked merge sort", fontsize=11, fontweight="bold")
    for ax in axes:
        ax.set_xlabel("Queue size n")
        ax.set_ylabel("Seconds")
        ax.legend()
        ax.grid(True, alpha=0.3, which="both")
    fig.tight_layout()
    path = VIZ_DIR / "04_scaling.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    print()
    return [path]


# ---------------------------------------------------------------------------
# Example 5: Sort Across Input Shapes
# ---------------------------------------------------------------------------
def example_5_input_shapes():
    """Sort time and correctness on random, sorted, reversed and equal input."""
    print("=" * 60)
    print("Example 5: Sort Across Input Shapes")
    print("=" * 60)

    n = SIZES[-1]
    words = random_words(n)
    shapes = {
        "random": words,
        "sorted": sorted(words),
        "reversed": sorted(words, reverse=True),
        "all equal": ["same"] * n,
    }

    timings = {}
    for name, data in shapes.items():
        q = build_queue(data)
        start = time.perf_counter()
        q.sort()
        timings[name] = time.perf_counter() - start
        out = drain(q)
        assert out == sorted(data), f"{name}: sort produced wrong order"
        print(f"  {name:10s}: {timings[name] * 1e3:8.3f} ms  (verified)")

    # stability: equal keys keep insertion order, tracked by element identity
    rng = random.Random(SEED)
    keys = [rng.choice("abc") for _ in range(30)]
    q = build_queue(keys)
    node = q._head
    before = []
    while node is not None:
        before.append(node)
        node = node.next
    q.sort()
    node = q._head
    rank = {id(e): i for i, e in enumerate(before)}
    stable = True
    prev = None
    while node is not None:
        if prev is not None and prev.value == node.value:
            stable &= rank[id(prev)] < rank[id(node)]
        prev = node
        node = node.next
    print(f"  stable on {len(keys)} keys drawn from 'abc': {stable}")
    assert stable

    fig, ax = plt.subplots(figsize=(9, 5))
    x = np.arange(len(timings))
    ax.bar(x, [t * 1e3 for t in timings.values()], 0.5,
           color=[COLORS["blue"], COLORS["green"], COLORS["red"], COLORS["orange"]],
           edgecolor="white")
    ax.set_xticks(x)
    ax.set_xticklabels(list(timings.keys()))
    ax.set_ylabel("Milliseconds")
    ax.set_title(f"sort on n={n:,} by input shape", fontsize=11, fontweight="bold")
    ax.grid(True, alpha=0.3, axis="y")
    fig.tight_layout()
    path = VIZ_DIR / "05_input_shapes.png"
    fig.savefig(path, dpi=150)
    plt.close(fig)
    print()
    return [path]


def generate_pdf_report(all_figures):
    print("=" * 60)
    print("Generating PDF Report")
    print("=" * 60)

    with PdfPages(REPORT_PATH) as pdf:
        fig, ax = plt.subplots(figsize=(11, 8))
        ax.axis("off")
        summary_text = (
            "String Queue -- Summary\n\n"
            "1. Ordering: insert_tail/remove_head is FIFO,\n"
            "   insert_head/remove_head is LIFO.\n\n"
            "2. Bounded removal copies at most capacity - 1 bytes and\n"
            "   always writes a terminator.\n\n"
            "3. insert_tail, size and remove_head cost the same per call\n"
            "   regardless of queue length.\n\n"
            "4. reverse relinks in O(n); merge sort runs in O(n log n).\n\n"
            "5. sort is correct and stable on random, sorted, reversed\n"
            "   and all-equal input."
        )
        ax.text(0.05, 0.95, summary_text, fontsize=11, va="top", ha="left",
                transform=ax.transAxes, family="monospace")
        fig.tight_layout()
        pdf.savefig(fig)
        plt.close(fig)

        titles = [
            "Example 2: Bounded Removal",
            "Example 3: Constant-Time Operations",
            "Example 4: Reverse and Sort Scaling",
            "Example 5: Sort Across Input Shapes",
        ]

        for fig_path, title in zip(all_figures, titles):
            if fig_path.exists():
                img = plt.imread(str(fig_path))
                fig, ax = plt.subplots(figsize=(11, 8))
                ax.imshow(img)
                ax.axis("off")
                ax.set_title(title, fontsize=14, fontweight="bold", pad=10)
                fig.tight_layout()
                pdf.savefig(fig)
                plt.close(fig)

    print(f"  Report saved to: {REPORT_PATH}")
    print()


def main():
    print()
    print("*" * 60)
    print("  STRING QUEUE -- COMPREHENSIVE DEMO")
    print(f"  Seed: {SEED}")
    print("*" * 60)
    print()

    all_figures = []
    all_figures.extend(example_1_ordering_laws())
    all_figures.extend(example_2_bounded_removal())
    all_figures.extend(example_3_constant_time())
    all_figures.extend(example_4_scaling())
    all_figures.extend(example_5_input_shapes())

    generate_pdf_report(all_figures)

    print("=" * 60)
    print("DEMO COMPLETE")
    print("=" * 60)
    print(f"  Visualizations: {VIZ_DIR}/")
    for f in sorted(VIZ_DIR.glob("*.png")):
        print(f"    - {f.name}")
    print(f"  PDF Report:     {REPORT_PATH}")
    print()


if __name__ == "__main__":
    main()
