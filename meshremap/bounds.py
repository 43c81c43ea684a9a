"""Bounding-box analysis of arbitrary (unstructured) meshes."""

from __future__ import annotations

from meshremap.geometry import Mesh, Vector3D


class BoundsAnalyzer:
    """Bounding box, extent and centre of a mesh, with normalisation helpers."""

    def __init__(self) -> None:
        self.bb_min = Vector3D()
        self.bb_max = Vector3D()
        self.dimensions = Vector3D()
        self.center = Vector3D()

    def analyze(self, mesh: Mesh) -> None:
        """Compute the bounding box of the mesh nodes; all zero for an empty mesh."""
        if not mesh.nodes:
            self.bb_min = Vector3D()
            self.bb_max = Vector3D()
            self.dimensions = Vector3D()
            self.center = Vector3D()
            return
        self.bb_min, self.bb_max = mesh.bounding_box()
        self.dimensions = self.bb_max - self.bb_min
        self.center = (self.bb_min + self.bb_max) * 0.5

    def normalize(self, position: Vector3D) -> Vector3D:
        """Map a position into [0, 1] per axis; a flat axis maps to 0.5."""

        def axis(value: float, low: float, size: float) -> float:
            return (value - low) / size if size > 0 else 0.5

        return Vector3D(
            axis(position.x, self.bb_min.x, self.dimensions.x),
            axis(position.y, self.bb_min.y, self.dimensions.y),
            axis(position.z, self.bb_min.z, self.dimensions.z),
        )

    def scale_factor(self, other: BoundsAnalyzer) -> Vector3D:
        """Per-axis ratio of the other extent to this one; 1 where either is flat."""

        def axis(mine: float, theirs: float) -> float:
            return theirs / mine if mine > 0 and theirs > 0 else 1.0

        return Vector3D(
            axis(self.dimensions.x, other.dimensions.x),
            axis(self.dimensions.y, other.dimensions.y),
            axis(self.dimensions.z, other.dimensions.z),
        )

    def scale_to_size(self, target_x: float, target_y: float, target_z: float) -> Vector3D:
        """Per-axis factor that scales this extent to the target size; 1 where flat."""

        def axis(mine: float, target: float) -> float:
            return target / mine if mine > 0 else 1.0

        return Vector3D(
            axis(self.dimensions.x, target_x),
            axis(self.dimensions.y, target_y),
            axis(self.dimensions.z, target_z),
        )