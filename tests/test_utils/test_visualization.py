import pytest
import json

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
import networkx as nx

from src.core import Processor, Sink, Source
from src.environment import Constant, build_graph
from src.simulation import Monitor, statistics_frame, events_frame
from src.utils.visualization import VisualizationManager, plot_all_results


def wire(generator, component):
    generator.next = component
    return generator


@pytest.fixture
def visualization_manager(tmp_path):
    """Create visualization manager"""
    return VisualizationManager(output_dir=tmp_path / 'plots')


@pytest.fixture
def simulated():
    """Components and exited events of a small pipeline"""
    sink = Sink("exit")
    processor = Processor("server", [wire(Constant(0.5), sink)], monitor=True)
    source = Source("arrivals", wire(Constant(1.0), processor), monitor=True)
    events = []
    for _ in range(8):
        event = source.simulate(None)
        while not event.terminal:
            event.simulate()
        events.append(event)
    return [source, processor, sink], events


@pytest.fixture
def station_data(simulated):
    components, _ = simulated
    monitor = Monitor(0.0, 6.0)
    return statistics_frame(monitor.display_statistics(c) for c in components[:2])


@pytest.fixture
def event_data(simulated):
    _, events = simulated
    return events_frame(events)


class TestVisualizationManager:
    def test_initialization(self, visualization_manager):
        """Test visualization manager initialization"""
        assert visualization_manager.output_dir.exists()

    def test_save_plot(self, visualization_manager):
        """Test plot saving functionality"""
        fig, ax = plt.subplots()
        ax.plot([1, 2, 3], [1, 2, 3])
        visualization_manager.save_plot(fig=fig, name="test_plot", formats=['png', 'svg'])
        plt.close(fig)

        assert (visualization_manager.output_dir / "test_plot.png").exists()
        assert (visualization_manager.output_dir / "test_plot.svg").exists()

    def test_station_statistics_plot(self, visualization_manager, station_data):
        """Test the utilization and wait bar charts"""
        fig = visualization_manager.plot_station_statistics(station_data)
        assert isinstance(fig, plt.Figure)
        assert len(fig.axes) == 2
        assert fig.axes[0].get_title() == 'Station Utilization'
        plt.close(fig)

    def test_event_lifetimes_plot(self, visualization_manager, event_data):
        """Test the lifetime distribution plots"""
        fig = visualization_manager.plot_event_lifetimes(event_data)
        assert isinstance(fig, plt.Figure)
        assert fig.axes[1].get_title() == 'Lifetime by Source'
        plt.close(fig)

    def test_network_topology_plot(self, visualization_manager, simulated):
        """Test drawing the component network"""
        components, _ = simulated
        graph = build_graph(components)
        fig = visualization_manager.plot_network_topology(graph)
        assert isinstance(fig, plt.Figure)
        assert fig.axes[0].get_title() == "Component Network"
        plt.close(fig)

    def test_cyclic_topology_plot(self, visualization_manager):
        """Test that feedback loops fall back to a spring layout"""
        graph = nx.DiGraph([('a', 'b'), ('b', 'a')])
        fig = visualization_manager.plot_network_topology(graph, node_colors={'a': 'red'})
        assert isinstance(fig, plt.Figure)
        plt.close(fig)

    def test_queue_depth_plot(self, visualization_manager, simulated):
        """Test the queue depth step plot"""
        components, _ = simulated
        fig = visualization_manager.plot_queue_depths({'server': components[1].depths})
        assert fig.axes[0].get_ylabel() == 'Events In Flight'
        plt.close(fig)


def test_performance_report_creation(visualization_manager, station_data):
    """Test the JSON performance report"""
    output = visualization_manager.output_dir / "report.json"
    visualization_manager.create_performance_report(
        station_data, {'count': 6, 'throughput': 1.0}, output
    )

    with open(output) as f:
        report = json.load(f)
    assert 'timestamp' in report
    assert report['events']['count'] == 6
    assert [row['label'] for row in report['stations']] == ['arrivals', 'server']


def test_plot_all_results(tmp_path, simulated, station_data, event_data):
    """Test generating every plot for a run"""
    components, _ = simulated
    plot_all_results(
        station_data,
        event_data,
        build_graph(components),
        tmp_path / 'all',
        depths={'server': components[1].depths}
    )

    for name in ('network_topology', 'station_statistics', 'event_lifetimes', 'queue_depths'):
        assert (tmp_path / 'all' / f"{name}.png").exists()
        assert (tmp_path / 'all' / f"{name}.pdf").exists()
