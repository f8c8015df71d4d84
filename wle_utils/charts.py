"""
Chart generation for the activity report using Plotly.
Every function returns an HTML fragment; ``write_report_html`` stitches them
into a single standalone page.
"""
import os
from typing import Dict, List, Any

import pandas as pd
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from .evaluation import EvaluationResult

CHART_CONFIG = {
    'displayModeBar': True,
    'displaylogo': False,
    'modeBarButtonsToRemove': ['pan2d', 'lasso2d', 'select2d'],
    'responsive': True
}

COLORS = ['#1FB8CD', '#FF6B6B', '#4ECDC4', '#45B7D1', '#96CEB4', '#FECA57', '#FF9FF3']


def _to_html(fig: go.Figure, div_id: str) -> str:
    return fig.to_html(full_html=False, include_plotlyjs=False, config=CHART_CONFIG, div_id=div_id)


def create_missing_values_chart(stats: Dict[str, Any], threshold: float = 0.9) -> str:
    """Missing percentage per column, with the drop threshold drawn across."""
    missing = stats.get('missing_percentage', {}) if stats else {}
    if not missing:
        return "<div class='chart-placeholder'>No missing values information available</div>"

    columns = list(missing.keys())
    values = [missing[c] or 0 for c in columns]
    colors = ['#FF6B6B' if v > threshold * 100 else '#1FB8CD' for v in values]
    n_dropped = sum(v > threshold * 100 for v in values)

    fig = go.Figure(data=[go.Bar(x=columns, y=values, marker=dict(color=colors))])
    fig.add_hline(y=threshold * 100, line_dash='dash', line_color='#333')
    fig.update_layout(
        title=f'Missing Values by Column<br><sub>{n_dropped} of {len(columns)} columns above {threshold:.0%}</sub>',
        xaxis_title='Columns',
        yaxis_title='Missing (%)',
        height=400,
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
        margin=dict(l=50, r=50, t=70, b=150),
        xaxis=dict(tickangle=45, showticklabels=len(columns) <= 60)
    )
    return _to_html(fig, "missingChart")


def create_predictor_boxplots(df: pd.DataFrame, label_column: str, columns: List[str],
                              n_cols: int = 4) -> str:
    """Box plot of each predictor split by class, used to eyeball useful columns."""
    columns = [c for c in columns if c in df.columns]
    if not columns or label_column not in df.columns:
        return "<div class='chart-placeholder'>No predictors to plot</div>"

    n_rows = -(-len(columns) // n_cols)
    fig = make_subplots(rows=n_rows, cols=n_cols, subplot_titles=columns)
    labels = df[label_column].astype(str)

    for i, col in enumerate(columns):
        fig.add_trace(
            go.Box(x=labels, y=df[col], name=col, marker=dict(color=COLORS[i % len(COLORS)]),
                   showlegend=False, boxpoints=False),
            row=i // n_cols + 1, col=i % n_cols + 1
        )

    fig.update_layout(
        title=f'Predictors by {label_column}',
        height=280 * n_rows,
        font=dict(size=11),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
    )
    return _to_html(fig, "predictorChart")


def create_model_performance_chart(results: Dict[str, EvaluationResult]) -> str:
    """Accuracy per model with its confidence interval as error bars."""
    if not results:
        return "<div class='chart-placeholder'>No model performance data available</div>"

    models = list(results.keys())
    accuracy = [results[m].accuracy for m in models]
    upper = [results[m].accuracy_ci[1] - results[m].accuracy for m in models]
    lower = [results[m].accuracy - results[m].accuracy_ci[0] for m in models]

    fig = go.Figure(data=[
        go.Bar(
            x=models,
            y=accuracy,
            marker=dict(color=COLORS[:len(models)]),
            error_y=dict(type='data', array=upper, arrayminus=lower),
            text=[f'{a:.3f}' for a in accuracy],
            textposition='auto',
        )
    ])
    partition = next(iter(results.values())).partition_name
    fig.update_layout(
        title=f'Model Accuracy on {partition}',
        xaxis_title='Models',
        yaxis_title='Accuracy',
        yaxis=dict(range=[0, 1.05]),
        height=400,
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
    )
    return _to_html(fig, "performanceChart")


def create_confusion_matrix_chart(result: EvaluationResult) -> str:
    if result is None or result.confusion.empty:
        return "<div class='chart-placeholder'>No confusion matrix available</div>"

    confusion = result.confusion
    fig = go.Figure(data=[go.Heatmap(
        z=confusion.values,
        x=[str(c) for c in confusion.columns],
        y=[str(i) for i in confusion.index],
        colorscale='Blues',
        text=confusion.values,
        texttemplate='%{text}',
    )])
    fig.update_layout(
        title=f'Confusion Matrix - {result.model_name} ({result.partition_name})',
        xaxis_title='Predicted',
        yaxis_title='Actual',
        yaxis=dict(autorange='reversed'),
        height=450,
        font=dict(size=12),
    )
    return _to_html(fig, f"confusion_{result.model_name}_{result.partition_name}")


def create_feature_importance_chart(importance: Dict[str, float], model_name: str, top: int = 15) -> str:
    if not importance:
        return f"<div class='chart-placeholder'>No feature importance data for {model_name}</div>"

    sorted_features = sorted(importance.items(), key=lambda x: x[1], reverse=True)[:top]
    features = [item[0] for item in sorted_features]
    values = [item[1] for item in sorted_features]

    fig = go.Figure(data=[
        go.Bar(
            x=values,
            y=features,
            orientation='h',
            marker=dict(color='#1FB8CD'),
            text=[f'{v:.4f}' for v in values],
            textposition='auto',
        )
    ])
    fig.update_layout(
        title=f'Feature Importance - {model_name}',
        xaxis_title='Importance Score',
        yaxis=dict(autorange='reversed'),
        height=450,
        margin=dict(l=200, r=50, t=50, b=50),
        font=dict(size=12),
        plot_bgcolor='rgba(0,0,0,0)',
        paper_bgcolor='rgba(0,0,0,0)',
    )
    return _to_html(fig, "featureImportanceChart")


def write_report_html(charts: Dict[str, str], output_dir: str, filename: str = 'report.html') -> str:
    """Write all chart fragments to one page that loads plotly.js from the CDN."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, filename)

    sections = [f"<section><h2>{title}</h2>{fragment}</section>" for title, fragment in charts.items()]
    page = (
        "<html><head><meta charset='utf-8'>"
        "<script src='https://cdn.plot.ly/plotly-2.35.2.min.js'></script>"
        "<title>Activity classification report</title></head><body>"
        + "".join(sections)
        + "</body></html>"
    )
    with open(path, 'w', encoding='utf-8') as f:
        f.write(page)
    print(f"Charts written to: {path}")
    return path
