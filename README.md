# meshremap

A library for structured hexahedral meshes. It can find the structured grid inside a
bent mesh and measure the grid's boundary edges. It can map a flat mesh onto the bent
shape, and it can unfold a bent mesh into a flat one. It needs only the Python
standard library, version 3.10 or later.

## Installation

```
pip install .
```

To install with the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `meshremap.geometry` holds the mesh containers:
  - `Vector3D` supports arithmetic operators, `dot`, `cross`, `magnitude`,
    `magnitude_squared`, `normalized`, `distance_to` and `Vector3D.lerp`.
  - `Node` has an optional `mapped_position` and `effective_position()`.
  - `Element` is a HEX8 element with `node_ids`, grid indices `i, j, k`,
    `set_grid_index`, `face_node_ids`, `opposite_face` and `face_axis`.
  - `Part`.
  - `Mesh` keeps its nodes, elements and parts in dicts keyed by id. It has
    `bounding_box`, `set_grid_dimensions`, `copy` and `clear`.
- `meshremap.bounds`: `BoundsAnalyzer` computes the bounding box, extent and centre of
  a mesh. It also provides `normalize`, `scale_factor` and `scale_to_size`.
- `meshremap.interpolation`:
  - `EdgeInterpolator` interpolates along a polyline by normalised arc length, and
    gives the `tangent` at a parameter.
  - `FaceInterpolator` is either a bilinear patch (`build_bilinear`) or a Coons patch
    of four edges (`build`).
- `meshremap.connectivity`: `ConnectivityAnalyzer.build` finds elements that share a
  face. It sets `is_structured` and `error_message`, and lists the corner, edge, face
  and interior elements and the boundary faces.
- `meshremap.indexer`: `StructuredGridIndexer.assign_indices` starts at a corner
  element and walks outward, giving every element an `(i, j, k)` index. It also
  provides `element_at` lookup, `reorder_axes` and `swap_axes`.
- `meshremap.boundary`: `BoundaryExtractor.extract` builds the node grid and finds the
  8 corner nodes and the 12 edge node chains. `nodes_on_face` returns the nodes on one
  grid face.
- `meshremap.edges`: `EdgeCalculator` measures the twelve boundary edges. It gives the
  neutral (average) length along each axis, `avg_element_size` and `edge_strain`.
- `meshremap.neutral_grid`: `NeutralGridGenerator.generate` builds a regular box grid
  of a given size. `generate_from_edges` takes the grid size from an `EdgeCalculator`.
- `meshremap.parametric`: `ParametricMapper` maps `(u, v, w)` in `[0, 1]^3` to
  physical points. `map_to_physical` uses edge-based interpolation. Trilinear and
  transfinite (Gordon–Hall) interpolation are also available.
- `meshremap.remapper`: `MeshRemapper.perform_mapping` maps every node of a flat mesh
  into the bent shape and returns the mapped mesh. `stats` is a `MappingStats` with
  node and element counts, min/max/average Jacobian, the number of invalid elements
  and the time taken.
- `meshremap.unfold`: `FlatMeshGenerator.generate_flat_mesh` unfolds a bent structured
  mesh. The flat length along I is the average arc length of the four I-edges.

## Example

```python
import math

from meshremap.geometry import Vector3D
from meshremap.neutral_grid import NeutralGridGenerator
from meshremap.remapper import MeshRemapper
from meshremap.unfold import FlatMeshGenerator

# A straight 8 x 2 x 2 grid, bent into an arc.
bent = NeutralGridGenerator().generate(8, 2, 2, 8.0, 2.0, 1.0)
for node in bent.nodes.values():
    angle = node.position.x / 10.0
    radius = 10.0 + node.position.y
    node.position = Vector3D(
        radius * math.sin(angle), 10.0 - radius * math.cos(angle), node.position.z
    )

flat = FlatMeshGenerator().generate_flat_mesh(bent)

remapper = MeshRemapper(bent_mesh=bent, flat_mesh=flat)
result = remapper.perform_mapping()
print(len(result.nodes), remapper.stats.min_jacobian, remapper.stats.invalid_elements)
```

Failures raise exceptions:

- `IndexingError` from `meshremap.indexer`.
- `MappingError` from `meshremap.remapper`.
- `UnfoldError` from `meshremap.unfold`.

## What this package does not do

The package works on in-memory `Mesh` objects only. It does not include:

- reading or writing mesh files;
- a command-line program;
- generators for example bent meshes;
- strain or stress analysis.

Building the meshes, and saving the results, is up to the calling code.