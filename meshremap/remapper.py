"""Mapping of a flat mesh onto a bent structured reference mesh."""

from __future__ import annotations

import copy
import sys
import time
from dataclasses import dataclass
from typing import Callable, Optional

from meshremap.boundary import BoundaryExtractor
from meshremap.bounds import BoundsAnalyzer
from meshremap.connectivity import ConnectivityAnalyzer
from meshremap.edges import EdgeCalculator
from meshremap.geometry import Mesh, Node, Vector3D
from meshremap.indexer import IndexingError, StructuredGridIndexer
from meshremap.parametric import ParametricMapper

ProgressCallback = Callable[[int], None]


class MappingError(Exception):
    """Raised when a mapping cannot be carried out."""


@dataclass
class MappingStats:
    """Counts and element quality figures gathered during a mapping."""

    nodes_processed: int = 0
    elements_processed: int = 0
    invalid_elements: int = 0
    min_jacobian: float = 0.0
    max_jacobian: float = 0.0
    avg_jacobian: float = 0.0
    processing_time_ms: float = 0.0


def _clamped_ratio(value: float, low: float, size: float) -> float:
    if size > 0:
        return max(0.0, min(1.0, (value - low) / size))
    return 0.0


class MeshRemapper:
    """Maps every node of a flat mesh into the shape of a bent structured mesh."""

    def __init__(
        self,
        bent_mesh: Optional[Mesh] = None,
        flat_mesh: Optional[Mesh] = None,
        progress_callback: Optional[ProgressCallback] = None,
    ) -> None:
        self.bent_mesh = bent_mesh
        self.flat_mesh = flat_mesh
        self.progress_callback = progress_callback
        self.stats = MappingStats()
        self.result = Mesh()
        self.connectivity = ConnectivityAnalyzer()
        self.indexer = StructuredGridIndexer()
        self.boundary = BoundaryExtractor()
        self.edge_calculator = EdgeCalculator()
        self.parametric_mapper = ParametricMapper()
        self.flat_bounds = BoundsAnalyzer()

    def perform_mapping(self) -> Mesh:
        """Run all mapping steps and return the mapped mesh (also kept in ``result``)."""
        start = time.perf_counter()
        self.stats = MappingStats()

        if self.bent_mesh is None:
            raise MappingError("Bent mesh not set")
        if self.flat_mesh is None:
            raise MappingError("Flat mesh not set")

        self._report_progress(0)
        indexed_bent = self._analyze_bent_mesh(self.bent_mesh)
        self._report_progress(15)
        self._build_parametric_space(indexed_bent)
        self._report_progress(30)
        self.flat_bounds.analyze(self.flat_mesh)
        self._report_progress(45)
        self._map_nodes(self.flat_mesh)
        self._report_progress(70)
        self._copy_elements(self.flat_mesh)
        self._report_progress(85)
        self._validate_result()
        self._report_progress(100)

        self.stats.processing_time_ms = (time.perf_counter() - start) * 1000.0
        return self.result

    def _analyze_bent_mesh(self, bent_mesh: Mesh) -> Mesh:
        working = bent_mesh.copy()
        self.connectivity.build(working)
        if not self.connectivity.is_structured:
            raise MappingError(
                "Bent mesh is not a valid structured grid: " + self.connectivity.error_message
            )
        try:
            self.indexer.assign_indices(working, self.connectivity)
        except IndexingError as exc:
            raise MappingError(f"Failed to assign structured indices: {exc}") from exc
        self.indexer.build_index_lookup(working)
        self.boundary.extract(working)
        self.edge_calculator.calculate_all_edges(working, self.boundary)
        return working

    def _build_parametric_space(self, indexed_bent: Mesh) -> None:
        self.parametric_mapper.build(indexed_bent, self.boundary, self.edge_calculator)
        if not self.parametric_mapper.valid:
            raise MappingError("Failed to build parametric mapper")

    def _map_nodes(self, flat_mesh: Mesh) -> None:
        self.result = Mesh(name=flat_mesh.name + "_mapped")
        low, high = flat_mesh.bounding_box()
        size = high - low

        for flat_node in flat_mesh.nodes.values():
            p = flat_node.position
            u = _clamped_ratio(p.x, low.x, size.x)
            v = _clamped_ratio(p.y, low.y, size.y)
            w = _clamped_ratio(p.z, low.z, size.z)
            bent_position = self.parametric_mapper.map_to_physical(u, v, w)
            self.result.add_node(
                Node(flat_node.id, bent_position, mapped_position=bent_position)
            )
            self.stats.nodes_processed += 1

    def _copy_elements(self, flat_mesh: Mesh) -> None:
        for element in flat_mesh.elements.values():
            self.result.add_element(copy.deepcopy(element))
            self.stats.elements_processed += 1
        for part in flat_mesh.parts.values():
            self.result.add_part(copy.deepcopy(part))

    def _validate_result(self) -> None:
        stats = self.stats
        stats.invalid_elements = 0
        stats.min_jacobian = sys.float_info.max
        stats.max_jacobian = -sys.float_info.max
        total = 0.0
        elements = self.result.elements

        for element in elements.values():
            nodes = [self.result.node(node_id) for node_id in element.node_ids[:8]]
            if len(nodes) < 8 or any(node is None for node in nodes):
                stats.invalid_elements += 1
                continue
            c = [node.effective_position() for node in nodes]

            def face_mean(a: int, b: int, d: int, e: int) -> Vector3D:
                return (c[a] + c[b] + c[d] + c[e]) * 0.25

            dxdu = face_mean(1, 2, 5, 6) - face_mean(0, 3, 4, 7)
            dxdv = face_mean(2, 3, 6, 7) - face_mean(0, 1, 4, 5)
            dxdw = face_mean(4, 5, 6, 7) - face_mean(0, 1, 2, 3)
            jacobian = dxdu.dot(dxdv.cross(dxdw))

            stats.min_jacobian = min(stats.min_jacobian, jacobian)
            stats.max_jacobian = max(stats.max_jacobian, jacobian)
            total += jacobian
            if jacobian <= 0:
                stats.invalid_elements += 1

        if elements:
            stats.avg_jacobian = total / len(elements)

    def _report_progress(self, percent: int) -> None:
        if self.progress_callback is not None:
            self.progress_callback(percent)

    def detect_u_fold_geometry(self) -> bool:
        """True when the bent mesh's i-direction ends near its start in x."""
        c = self.parametric_mapper.corners
        size = max(
            abs(c[1].x - c[0].x),
            abs(c[1].y - c[0].y),
            abs(c[1].z - c[0].z),
            abs(c[5].x - c[0].x),
            abs(c[5].z - c[0].z),
        )
        if size < 1e-10:
            return False
        return abs(c[1].x - c[0].x) / size < 0.1

    def neutral_sizes(self) -> tuple[float, float, float]:
        """Neutral (average edge) lengths of the bent mesh along i, j and k."""
        calc = self.edge_calculator
        return calc.neutral_length_i, calc.neutral_length_j, calc.neutral_length_k