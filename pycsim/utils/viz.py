import plotly.express as px
import pandas as pd


def export_hit_rate(timeline, path: str):
    """Writes an HTML line chart of the cumulative hit rate over the logical clock."""
    if not timeline:
        with open(path, "w") as f:
            f.write("<h1>Cache Hit Rate</h1><p>No data to display.</p>")
        return

    df = pd.DataFrame(timeline)
    # Ensure numeric types for the counter columns, coercing errors
    for col in ('clock', 'hits', 'misses', 'evictions'):
        if col in df.columns:
            df[col] = pd.to_numeric(df[col], errors='coerce')
    df = df.dropna(subset=['clock', 'hits', 'misses']).sort_values('clock')
    df = df[(df['hits'] + df['misses']) > 0].copy()

    df['cum_hits'] = df['hits'].cumsum()
    df['cum_accesses'] = (df['hits'] + df['misses']).cumsum()
    df['hit_rate'] = df['cum_hits'] / df['cum_accesses']
    if 'evictions' in df.columns:
        df['cum_evictions'] = df['evictions'].fillna(0).cumsum()

    hover_data_cols = ['op', 'address', 'set', 'outcome', 'cum_evictions']
    existing_hover_cols = [c for c in hover_data_cols if c in df.columns]

    fig = px.line(
        df,
        x="clock",
        y="hit_rate",
        hover_data=existing_hover_cols,
        title="Cache Simulation Hit Rate",
        labels={"clock": "Logical Clock", "hit_rate": "Cumulative Hit Rate"},
    )

    fig.update_yaxes(range=[0, 1])
    fig.update_layout(
        height=500,
        font=dict(family="Courier New, monospace", size=12),
    )

    fig.write_html(path, include_plotlyjs="cdn", full_html=True)


def export_set_usage_ascii(per_set, width: int = 60):
    """Renders per-set access counts as horizontal bars.

    Each bar is drawn with 'h' for hits and 'm' for misses; sets never touched
    are left out.
    """
    if not per_set:
        return "No sets to display."

    used = [s for s in per_set if s['hits'] + s['misses'] > 0]
    if not used:
        return "No set was accessed."

    max_accesses = max(s['hits'] + s['misses'] for s in used)
    scale = width / max_accesses

    chart = "Cache Set Usage (ASCII)\n"
    chart += "-" * (width + 30) + "\n"

    for s in used:
        hit_len = int(round(s['hits'] * scale))
        miss_len = int(round(s['misses'] * scale))
        bar = ('h' * hit_len + 'm' * miss_len)[:width]
        chart += f"{'set ' + str(s['set']):>10} |{bar:<{width}}| {s['hits']}/{s['misses']}/{s['evictions']}\n"

    chart += "-" * (width + 30) + "\n"
    chart += f"{'':>10}  bars: h=hit m=miss, counts: hits/misses/evictions (max {max_accesses} accesses)\n"

    return chart
