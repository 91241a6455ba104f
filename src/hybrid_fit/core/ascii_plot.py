"""
ASCII plotting for progress series.

Creates terminal-friendly line charts of body weight and max load over time.
"""

from .models import SeriesPoint


def _fmt_value(value: float) -> str:
    return f"{value:g}"


def create_series_plot(
    points: list[SeriesPoint],
    title: str,
    unit: str = "kg",
    width: int = 60,
    height: int = 15,
) -> str:
    """
    Create an ASCII line chart of a progress series.

    The y-axis spans 90%..110% of the value range so that flat series are
    still readable.

    Args:
        points: Series points, oldest first
        title: Chart title
        unit: Unit appended to value labels
        width: Plot width in characters
        height: Plot height in lines

    Returns:
        ASCII art string
    """
    if not points:
        return f"{title}: no data yet."

    min_date = points[0].date
    max_date = points[-1].date
    time_range = (max_date - min_date).total_seconds() or 1.0

    y_min = min(p.value for p in points) * 0.9
    y_max = max(p.value for p in points) * 1.1
    y_range = (y_max - y_min) or 1.0

    plot_width = width - 8  # Leave room for y-axis labels
    plot_height = max(2, height - 3)  # Leave room for x-axis and title

    grid = [[" " for _ in range(plot_width)] for _ in range(plot_height)]

    # Convert points to grid coordinates; a single point sits on the left edge
    plot_points: list[tuple[int, int, float]] = []  # (x, y, value)
    for point in points:
        offset = (point.date - min_date).total_seconds()
        x = int((offset / time_range) * (plot_width - 1))
        y = int(((point.value - y_min) / y_range) * (plot_height - 1))
        y = plot_height - 1 - y  # Flip y-axis
        plot_points.append((x, y, point.value))

    def _p(x: int, r: int, ch: str) -> None:
        if 0 <= x < plot_width and 0 <= r < plot_height and grid[r][x] == " ":
            grid[r][x] = ch

    # Draw connecting lines (staircase style: ╭─╯)
    for i in range(len(plot_points) - 1):
        col1, row1, _ = plot_points[i]
        col2, row2, _ = plot_points[i + 1]

        n_rows = abs(row2 - row1)
        if n_rows == 0:
            for x in range(col1 + 1, col2):
                _p(x, row1, "─")
            continue

        if col1 == col2:
            for r in range(min(row1, row2) + 1, max(row1, row2)):
                _p(col1, r, "│")
            continue

        row_dir = -1 if row2 < row1 else 1  # -1 = going up (higher value)
        corner_exit = "╯" if row_dir == -1 else "╮"
        corner_entry = "╭" if row_dir == -1 else "╰"
        n_segs = n_rows + 1

        for step in range(n_segs):
            row = row1 + row_dir * step
            pivot_in = col1 + (col2 - col1) * step // n_segs
            pivot_out = col1 + (col2 - col1) * (step + 1) // n_segs

            if step == 0:
                for x in range(col1 + 1, pivot_out):
                    _p(x, row, "─")
                _p(pivot_out, row, corner_exit)
            elif step == n_segs - 1:
                _p(pivot_in, row, corner_entry)
                for x in range(pivot_in + 1, col2):
                    _p(x, row, "─")
            else:
                _p(pivot_in, row, corner_entry)
                for x in range(pivot_in + 1, pivot_out):
                    _p(x, row, "─")
                _p(pivot_out, row, corner_exit)

    for x, y, _ in plot_points:
        grid[y][x] = "●"

    # Label the last point, or every point when there are only a few
    labelled = plot_points if len(plot_points) <= 5 else plot_points[-1:]
    for x, y, value in labelled:
        text = f"({_fmt_value(value)})"
        pos = x + 2 if x + 2 + len(text) <= plot_width else x - len(text) - 1
        if pos < 0:
            continue
        for j, ch in enumerate(text):
            if grid[y][pos + j] != "●":
                grid[y][pos + j] = ch

    lines = [f"{title} ({unit})", "─" * width]
    for i, row in enumerate(grid):
        y_val = y_max - (i / (plot_height - 1)) * y_range
        lines.append(f"{y_val:6.1f} ┤" + "".join(row))
    lines.append("─" * width)

    label_line = [" "] * plot_width
    mid_date = min_date + (max_date - min_date) / 2
    for x_pos, date in ((0, min_date), (plot_width // 2, mid_date), (plot_width - 6, max_date)):
        if len(points) == 1 and x_pos > 0:
            break
        for j, ch in enumerate(date.strftime("%d.%m")):
            if 0 <= x_pos + j < plot_width:
                label_line[x_pos + j] = ch
    lines.append(" " * 8 + "".join(label_line))

    return "\n".join(lines)
