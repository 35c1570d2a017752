import matplotlib.pyplot as plt
import seaborn as sns
import networkx as nx
import numpy as np
import pandas as pd
from typing import Dict, List, Optional, Union
from pathlib import Path
import json
from datetime import datetime

# Node colours by component type
TYPE_COLORS = {
    'source': '#4c72b0',
    'processor': '#dd8452',
    'throttle': '#c44e52',
    'balancer': '#8172b3',
    'sink': '#55a868',
}


class VisualizationManager:
    """Manages creation and saving of visualization plots"""

    def __init__(
        self,
        output_dir: Union[str, Path],
        style: str = 'default'
    ):
        self.output_dir = Path(output_dir)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        plt.style.use(style)

    def save_plot(
        self,
        fig: plt.Figure,
        name: str,
        formats: Optional[List[str]] = None
    ) -> None:
        """Save plot in multiple formats"""
        for fmt in formats or ['png', 'pdf']:
            fig.savefig(
                self.output_dir / f"{name}.{fmt}",
                bbox_inches='tight',
                dpi=300
            )

    def plot_station_statistics(
        self,
        station_data: pd.DataFrame
    ) -> plt.Figure:
        """
        Bar charts of utilization and mean wait per station. Expects the
        frame produced by statistics_frame (indexed by label).
        """
        data = station_data.reset_index()
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(14, 6))

        stations = data[data['utilization'].notna()] if 'utilization' in data else data.iloc[0:0]
        sns.barplot(data=stations, x='label', y='utilization', ax=ax1)
        ax1.set_title('Station Utilization')
        ax1.set_xlabel('Station')
        ax1.set_ylabel('Utilization')
        ax1.set_ylim(0, 1)
        ax1.tick_params(axis='x', rotation=45)

        waits = data[data['wait_mean'].notna()] if 'wait_mean' in data else data.iloc[0:0]
        sns.barplot(data=waits, x='label', y='wait_mean', ax=ax2)
        ax2.set_title('Mean Wait Time')
        ax2.set_xlabel('Station')
        ax2.set_ylabel('Wait')
        ax2.tick_params(axis='x', rotation=45)

        fig.tight_layout()
        return fig

    def plot_event_lifetimes(
        self,
        event_data: pd.DataFrame
    ) -> plt.Figure:
        """Lifetime distribution of exited events, per source"""
        fig, (ax1, ax2) = plt.subplots(1, 2, figsize=(15, 6))

        sns.histplot(
            data=event_data,
            x='lifetime',
            hue='source',
            element='step',
            ax=ax1
        )
        ax1.set_title('Event Lifetime Distribution')
        ax1.set_xlabel('Lifetime')

        sns.boxplot(
            data=event_data,
            x='source',
            y='lifetime',
            ax=ax2
        )
        ax2.set_title('Lifetime by Source')
        ax2.set_xlabel('Source')
        ax2.set_ylabel('Lifetime')

        fig.tight_layout()
        return fig

    def plot_network_topology(
        self,
        graph: nx.DiGraph,
        node_colors: Optional[Dict[str, str]] = None
    ) -> plt.Figure:
        """Draw the component network, coloured by component type"""
        fig, ax = plt.subplots(figsize=(12, 8))

        if graph.number_of_nodes() and nx.is_directed_acyclic_graph(graph):
            # Lay stations out left to right in flow order
            for layer, nodes in enumerate(nx.topological_generations(graph)):
                for node in nodes:
                    graph.nodes[node]['layer'] = layer
            pos = nx.multipartite_layout(graph, subset_key='layer')
        else:
            pos = nx.spring_layout(graph, seed=0)

        colors = [
            (node_colors or {}).get(node, TYPE_COLORS.get(graph.nodes[node].get('type'), '#999999'))
            for node in graph.nodes()
        ]
        nx.draw_networkx_nodes(graph, pos, node_color=colors, node_size=1200, alpha=0.8, ax=ax)
        nx.draw_networkx_edges(graph, pos, arrows=True, arrowsize=20, alpha=0.6, ax=ax)
        nx.draw_networkx_labels(graph, pos, ax=ax)

        ax.set_title("Component Network")
        ax.axis('off')

        return fig

    def plot_queue_depths(
        self,
        depths: Dict[str, List[int]]
    ) -> plt.Figure:
        """Queue depth samples over admissions, one line per station"""
        fig, ax = plt.subplots(figsize=(12, 6))
        for label, samples in depths.items():
            if samples:
                ax.step(np.arange(len(samples)), samples, where='post', label=label)
        ax.set_xlabel('Admission')
        ax.set_ylabel('Events In Flight')
        ax.set_title('Queue Depth')
        if ax.get_legend_handles_labels()[0]:
            ax.legend()
        ax.grid(True)
        return fig

    def create_performance_report(
        self,
        station_data: pd.DataFrame,
        event_summary: Dict,
        output_file: Union[str, Path]
    ) -> None:
        """Write a JSON report of the station and event statistics"""
        report = {
            'timestamp': datetime.now().isoformat(),
            'events': event_summary,
            'stations': json.loads(station_data.reset_index().to_json(orient='records'))
        }
        with open(output_file, 'w') as f:
            json.dump(report, f, indent=2)


def plot_all_results(
    station_data: pd.DataFrame,
    event_data: pd.DataFrame,
    graph: nx.DiGraph,
    output_dir: Union[str, Path],
    depths: Optional[Dict[str, List[int]]] = None
) -> None:
    """Generate all plots for a simulation run"""
    viz = VisualizationManager(output_dir)

    fig = viz.plot_network_topology(graph)
    viz.save_plot(fig, 'network_topology')
    plt.close(fig)

    if not station_data.empty:
        fig = viz.plot_station_statistics(station_data)
        viz.save_plot(fig, 'station_statistics')
        plt.close(fig)

    if not event_data.empty:
        fig = viz.plot_event_lifetimes(event_data)
        viz.save_plot(fig, 'event_lifetimes')
        plt.close(fig)

    if depths:
        fig = viz.plot_queue_depths(depths)
        viz.save_plot(fig, 'queue_depths')
        plt.close(fig)
