# src/ui/charts.py
from __future__ import annotations

import pandas as pd
import plotly.graph_objects as go
import streamlit as st

from src.config import settings


def render_score_chart(df: pd.DataFrame, title: str = "Handicapped daily value") -> None:
    """
    Bar chart of each coin's selection score.

    Expected df columns (see coins_to_frame):
    - Symbol, Score, Status, Selected
    Coins that selection skips are drawn at zero in the error colour.
    """
    required = {"Symbol", "Score", "Status", "Selected"}
    if not required.issubset(df.columns):
        raise ValueError(f"DataFrame must contain {sorted(required)} columns")

    if df.empty:
        st.info("No coins configured.")
        return

    df_plot = df.copy()
    df_plot["Score"] = df_plot["Score"].fillna(0.0)

    colors = [
        settings.SELECTED_COIN_HEX
        if selected
        else (settings.OTHER_COIN_HEX if status == "OK" else settings.ERROR_COIN_HEX)
        for selected, status in zip(df_plot["Selected"], df_plot["Status"])
    ]

    fig = go.Figure(
        go.Bar(
            x=df_plot["Symbol"],
            y=df_plot["Score"],
            marker=dict(color=colors),
            customdata=df_plot[["Status"]],
            hovertemplate=(
                "<b>%{x}</b><br>Score: %{y:,.4f}<br>%{customdata[0]}<extra></extra>"
            ),
        )
    )
    fig.update_layout(
        title=title,
        xaxis_title="Coin",
        yaxis_title="Score",
        margin=dict(l=40, r=20, t=50, b=40),
        showlegend=False,
    )

    st.plotly_chart(fig, width="stretch")
