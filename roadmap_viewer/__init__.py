"""Road Network Viewer - Query road maps interactively.

Loads a road network (intersections, roads, road segments) from tab
separated data files and answers the questions a map user asks:

- Shortest route between two intersections (A* search honouring one-way roads)
- Articulation points: intersections whose removal splits the network
- Roads by name prefix
- Nearest intersection to a clicked point

Modules:
    core: Algorithms (planar projection, path finder, cut vertex finder)
    model: Data structures (Intersection, Road, RoadSegment, RoadGraph, RouteResult)
    io: Data set loader
    search: Road name index
    ui: Streamlit interface components (state machine, map renderer, sidebar)

Example:
    from roadmap_viewer.io import NetworkLoader
    from roadmap_viewer.core.path_finder import PathFinder

    graph = NetworkLoader(data_dir="data/small").load()
    route = PathFinder().find_path(graph=graph, start_id=1, target_id=42)
"""
