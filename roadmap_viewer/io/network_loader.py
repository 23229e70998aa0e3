"""NetworkLoader - builds a RoadGraph from tab-separated data files.

A road network data set is a directory holding three files:

- nodeID-lat-lon.tab: one intersection per line, `id lat lon` (no header)
- roadID-roadInfo.tab: header line, then `roadid type label city oneway
  speed roadclass notforcar notforpede notforbicy`
- roadSeg-roadID-length-nodeID-nodeID-coords.tab: header line, then
  `roadid length nodeid1 nodeid2 lat1 lon1 lat2 lon2 ...`

Intersections are loaded first, then roads, then segments, so every
segment can be wired to entities that already exist.
"""

import csv
import logging
from collections.abc import Iterator
from pathlib import Path

from roadmap_viewer.constants import DataConfig
from roadmap_viewer.model.intersection import Intersection
from roadmap_viewer.model.road import Road
from roadmap_viewer.model.road_graph import RoadGraph

logger = logging.getLogger(__name__)


class NetworkFormatError(ValueError):
    """A data file line could not be parsed."""

    def __init__(self, message: str, file_name: str, line_number: int) -> None:
        super().__init__(f"{file_name}:{line_number}: {message}")
        self.file_name = file_name
        self.line_number = line_number


class NetworkLoader:
    """Loads a road network data set directory.

    Example:
        graph = NetworkLoader(data_dir=Path("data/small")).load()
    """

    def __init__(self, data_dir: Path | str) -> None:
        self.data_dir = Path(data_dir)

    @property
    def nodes_path(self) -> Path:
        return self.data_dir / DataConfig.NODES_FILE

    @property
    def roads_path(self) -> Path:
        return self.data_dir / DataConfig.ROADS_FILE

    @property
    def segments_path(self) -> Path:
        return self.data_dir / DataConfig.SEGMENTS_FILE

    def load(self) -> RoadGraph:
        """Parse all three files into a new RoadGraph.

        Raises:
            FileNotFoundError: If a data file is missing.
            NetworkFormatError: If a line is malformed or references unknown entities.
        """
        for path in (self.nodes_path, self.roads_path, self.segments_path):
            if not path.exists():
                raise FileNotFoundError(f"Road network file not found: {path}")

        graph = RoadGraph()
        self._load_intersections(graph=graph)
        self._load_roads(graph=graph)
        self._load_segments(graph=graph)

        logger.info(f"Loaded {graph} from {self.data_dir}")
        return graph

    # =========================================================================
    # File parsers
    # =========================================================================

    def _load_intersections(self, graph: RoadGraph) -> None:
        for line_number, row in self._rows(path=self.nodes_path, skip_header=False):
            if len(row) < 3:
                raise NetworkFormatError("expected 'id lat lon'", self.nodes_path.name, line_number)
            try:
                intersection = Intersection(id=int(row[0]), lat=float(row[1]), lon=float(row[2]))
                graph.add_intersection(intersection)
            except ValueError as e:
                raise NetworkFormatError(str(e), self.nodes_path.name, line_number) from e

    def _load_roads(self, graph: RoadGraph) -> None:
        for line_number, row in self._rows(path=self.roads_path, skip_header=True):
            if len(row) < 7:
                raise NetworkFormatError(
                    "expected 'roadid type label city oneway speed roadclass ...'",
                    self.roads_path.name,
                    line_number,
                )
            label, city = row[2].strip(), row[3].strip()
            name = city if label == DataConfig.NO_LABEL else label
            try:
                road = Road(
                    id=int(row[0]),
                    name=name,
                    city=city,
                    one_way=int(row[4]) == DataConfig.ONE_WAY_FLAG,
                    speed=int(row[5]),
                    road_class=int(row[6]),
                )
                graph.add_road(road)
            except ValueError as e:
                raise NetworkFormatError(str(e), self.roads_path.name, line_number) from e

    def _load_segments(self, graph: RoadGraph) -> None:
        for line_number, row in self._rows(path=self.segments_path, skip_header=True):
            if len(row) < 4:
                raise NetworkFormatError(
                    "expected 'roadid length nodeid1 nodeid2 coords...'",
                    self.segments_path.name,
                    line_number,
                )
            coord_values = row[4:]
            if len(coord_values) % 2 != 0:
                raise NetworkFormatError("odd number of coordinate values", self.segments_path.name, line_number)
            try:
                values = [float(v) for v in coord_values]
                coords = list(zip(values[0::2], values[1::2]))
                graph.add_segment(
                    road_id=int(row[0]),
                    length=float(row[1]),
                    start_id=int(row[2]),
                    end_id=int(row[3]),
                    coords=coords,
                )
            except ValueError as e:
                raise NetworkFormatError(str(e), self.segments_path.name, line_number) from e

    @staticmethod
    def _rows(path: Path, skip_header: bool) -> Iterator[tuple[int, list[str]]]:
        """Yield (1-based line number, fields) for non-blank lines."""
        with open(path, "r", encoding="utf-8", newline="") as fh:
            reader = csv.reader(fh, delimiter="\t", quoting=csv.QUOTE_NONE)
            try:
                for row in reader:
                    if skip_header and reader.line_num == 1:
                        continue
                    # Segment lines end with a trailing tab
                    while row and not row[-1].strip():
                        row.pop()
                    if not row:
                        continue
                    yield reader.line_num, row
            except UnicodeDecodeError as e:
                # Decoding runs ahead in blocks, so the line number is the first one not yet read
                raise NetworkFormatError(f"not valid UTF-8 ({e.reason})", path.name, reader.line_num + 1) from e
