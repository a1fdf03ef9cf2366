import pandas as pd

from cutofftrends import TrendContext, configure_logging
from cutofftrends.trend_engine.trend_summary import aligned_frame, delta_report

configure_logging(level="DEBUG")

df = pd.DataFrame(
    {
        "Institute": ["X, City"] * 3 + ["Y, Town"] * 2,
        "College Type": ["IIT"] * 5,
        "Academic Program Name": ["P (4yr)"] * 3 + ["Q (5yr)"] * 2,
        "Quota": ["HS"] * 5,
        "Category": ["OBC"] * 5,
        "Gender": ["GN"] * 5,
        "Round": [1, 2, 3, 2, 4],
        "Opening Rank": [100, 150, 160, 900, 1000],
        "Closing Rank": [200, 210, 230, 1500, ""],
    }
)

ctx = TrendContext(df)
for facet in ctx.chain:
    options = ctx.facet_options(facet)
    print(f"{facet}: {options}")
    ctx.select(facet, options[0])
print("series:", [p.to_dict() for p in ctx.current_series()])
print("added:", bool(ctx.add_to_comparison()))

ctx.select("institute", "Y, Town")
for facet in ctx.chain.downstream("institute"):
    ctx.select(facet, ctx.facet_options(facet)[0])
print("added:", bool(ctx.add_to_comparison()))

print(aligned_frame(ctx.comparison_entries(), ctx.comparison_rows()))
print(delta_report(ctx.comparison_deltas()))
