from datetime import datetime

from petsar import GeoPoint, HeatmapGenerator, HeatmapOptions, get_logger, visualize_heatmap

log = get_logger()

center = GeoPoint(35.681236, 139.767125)
options = HeatmapOptions(center=center, radius_km=1.0, zoom_level=16, time_elapsed=12, pet_size="small")

generator = HeatmapGenerator(seed=0)
heatmap = generator.generate_detailed_heatmap(options)
log.info(f"{len(heatmap)} heatmap points generated at {datetime.now():%H:%M:%S}")

visualize_heatmap(heatmap, center=center, output_file="heatmap.png")
