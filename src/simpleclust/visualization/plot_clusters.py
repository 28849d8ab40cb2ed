"""
Cluster visualization utilities.

Plots of 2D clustering results: hard partitions, fuzzy weight strengths,
decision regions of a fitted engine, and the scores of a cluster-count
search.
"""

from typing import Optional, List, Any, Sequence
import torch
from torch import Tensor
import matplotlib
import matplotlib.pyplot as plt
import numpy as np

from ..base.data_structures import CandidateScore


def _to_labels(weights_or_labels: Tensor) -> np.ndarray:
    """(n,) labels from either labels or (k, n) weights."""
    if weights_or_labels.dim() == 2:
        weights_or_labels = weights_or_labels.to(torch.float64).argmax(dim=0)
    return weights_or_labels.cpu().numpy()


def plot_clusters_2d(X: Tensor,
                     weights_or_labels: Tensor,
                     centers: Optional[Tensor] = None,
                     ax: Optional[plt.Axes] = None,
                     colors: Optional[List[str]] = None,
                     alpha: float = 0.7,
                     center_marker: str = 'X',
                     center_size: int = 200,
                     point_size: int = 50,
                     show_legend: bool = True,
                     title: Optional[str] = None) -> plt.Axes:
    """Plot 2D clustering results.

    Args:
        X: (n, 2) data points
        weights_or_labels: (n,) cluster labels or (k, n) hard or fuzzy weights
        centers: Optional (k, 2) cluster centers
        ax: Matplotlib axes (created if None)
        colors: List of colors for clusters
        alpha: Point transparency
        center_marker: Marker for centers
        center_size: Size of center markers
        point_size: Size of data points
        show_legend: Whether to show legend
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 6))

    X_np = X.detach().cpu().numpy()
    labels_np = _to_labels(weights_or_labels)

    unique_labels = np.unique(labels_np)
    n_clusters = len(unique_labels)

    if colors is None:
        cmap = matplotlib.colormaps['tab10' if n_clusters <= 10 else 'tab20']
        colors = [cmap(i / max(n_clusters, 1)) for i in range(n_clusters)]

    for i, label in enumerate(unique_labels):
        mask = labels_np == label
        ax.scatter(X_np[mask, 0], X_np[mask, 1],
                   c=[colors[i % len(colors)]],
                   s=point_size,
                   alpha=alpha,
                   edgecolors='black',
                   linewidth=0.5,
                   label=f'Cluster {label}')

    if centers is not None:
        # NaN rows belong to emptied clusters and are not drawn
        centers_np = centers.detach().cpu().numpy()
        centers_np = centers_np[~np.isnan(centers_np).any(axis=1)]
        ax.scatter(centers_np[:, 0], centers_np[:, 1],
                   c='black',
                   marker=center_marker,
                   s=center_size,
                   edgecolors='white',
                   linewidth=2,
                   label='Centers',
                   zorder=10)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')

    if title:
        ax.set_title(title)

    if show_legend:
        ax.legend()

    return ax


def plot_fuzzy_clusters(X: Tensor,
                        weights: Tensor,
                        centers: Optional[Tensor] = None,
                        ax: Optional[plt.Axes] = None,
                        cmap: str = 'viridis',
                        title: Optional[str] = None) -> plt.Axes:
    """Plot fuzzy clustering with weight strengths.

    Every entity is colored by mixing the cluster colors in proportion to
    its weights and sized by its strongest share.

    Args:
        X: (n, 2) data points
        weights: (k, n) hard or fuzzy weights, normalized or not
        centers: Optional (k, 2) cluster centers
        ax: Matplotlib axes
        cmap: Colormap name
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 8))

    X_np = X.detach().cpu().numpy()

    # Per-entity shares, so columns sum to 1 whatever normalization came in
    shares = weights.detach().to(torch.float64)
    shares = shares / shares.sum(dim=0, keepdim=True)
    shares_np = shares.cpu().numpy()

    n_clusters = shares_np.shape[0]
    colormap = matplotlib.colormaps[cmap]
    palette = np.array([colormap(k / max(n_clusters - 1, 1))[:3] for k in range(n_clusters)])

    colors = np.clip(shares_np.T @ palette, 0.0, 1.0)
    sizes = 20 + 80 * shares_np.max(axis=0)

    ax.scatter(X_np[:, 0], X_np[:, 1],
               c=colors,
               s=sizes,
               alpha=0.7,
               edgecolors='black',
               linewidth=0.5)

    if centers is not None:
        centers_np = centers.detach().cpu().numpy()
        ax.scatter(centers_np[:, 0], centers_np[:, 1],
                   c='red',
                   marker='X',
                   s=300,
                   edgecolors='white',
                   linewidth=2,
                   label='Centers',
                   zorder=10)
        ax.legend()

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')
    ax.set_title(title if title else 'Fuzzy Clustering Results')

    return ax


def plot_cluster_boundaries(X: Tensor,
                            model: Any,
                            ax: Optional[plt.Axes] = None,
                            resolution: int = 100,
                            alpha: float = 0.3,
                            show_data: bool = True,
                            title: Optional[str] = None) -> plt.Axes:
    """Plot the regions a fitted engine assigns to each cluster.

    Args:
        X: (n, 2) data points
        model: Fitted engine with ``predict`` and ``cluster_centers_``
        ax: Matplotlib axes
        resolution: Grid resolution
        alpha: Region transparency
        show_data: Whether to overlay the data points
        title: Plot title

    Returns:
        Matplotlib axes
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 8))

    X_np = X.detach().cpu().numpy()

    x_min, x_max = X_np[:, 0].min() - 0.5, X_np[:, 0].max() + 0.5
    y_min, y_max = X_np[:, 1].min() - 0.5, X_np[:, 1].max() + 0.5

    xx, yy = np.meshgrid(np.linspace(x_min, x_max, resolution),
                         np.linspace(y_min, y_max, resolution))

    mesh_points = torch.tensor(np.c_[xx.ravel(), yy.ravel()],
                               dtype=model.cluster_centers_.dtype)

    Z_np = model.predict(mesh_points).cpu().numpy().reshape(xx.shape)
    ax.contourf(xx, yy, Z_np, alpha=alpha, cmap='viridis')

    if show_data:
        plot_clusters_2d(X, model.labels_, centers=model.cluster_centers_, ax=ax,
                         show_legend=False)

    ax.set_xlabel('Feature 1')
    ax.set_ylabel('Feature 2')
    ax.set_title(title if title else 'Cluster Decision Boundaries')

    return ax


def plot_search_scores(candidates: Sequence[CandidateScore],
                       ax: Optional[plt.Axes] = None,
                       title: Optional[str] = None) -> plt.Axes:
    """Scatter the score of every search attempt against its cluster count.

    Attempts with a NaN score are drawn as red crosses on the x axis.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 5))

    counts = np.array([c.n_clusters for c in candidates], dtype=float)
    scores = np.array([c.score for c in candidates], dtype=float)
    usable = np.isfinite(scores)

    ax.scatter(counts[usable], scores[usable], c='tab:blue', label='Attempts')
    if (~usable).any():
        ax.scatter(counts[~usable], np.zeros((~usable).sum()), c='red', marker='x',
                   label='Degenerate')

    ax.set_xlabel('Number of clusters')
    ax.set_ylabel('Score')
    ax.set_title(title if title else 'Cluster Count Search')
    ax.legend()

    return ax
