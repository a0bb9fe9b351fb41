# examples/basic_usage_example.py
from datetime import datetime, timedelta

from petsar import (
    BehaviorPredictor,
    GeoPoint,
    HeatmapGenerator,
    HeatmapOptions,
    PetRecord,
    ProbabilityCalculator,
    ProbabilityFactors,
    export_heatmap_geojson,
    get_logger,
    visualize_heatmap,
)

log = get_logger()

def run_search_planning_example():
    """
    An example function demonstrating how to combine the behaviour predictor,
    heatmap generator and probability calculator for one missing pet.
    """
    log.info("--- Starting Search Planning Example ---")

    # 1. Describe the missing pet.
    now = datetime.now()
    pet = PetRecord(
        id="example-shiba",
        species="dog",
        last_seen_location=GeoPoint(35.658034, 139.701636),
        home_location=GeoPoint(35.6614, 139.7040),
        lost_date=now - timedelta(hours=5),
        distinctive_features=("curled tail", "red collar"),
    )

    # 2. Ranked candidate locations.
    predictor = BehaviorPredictor()
    prediction = predictor.predict_behavior(pet, now=now)
    for loc in prediction.predicted_locations:
        log.info(f"{loc.confidence:.0%} {loc.reason} (radius {loc.radius:.0f} m)")
    for step in prediction.search_strategy:
        log.info(f"Strategy: {step}")

    # 3. Heatmap around the last-seen point.
    output_dir = "petsar_output"
    generator = HeatmapGenerator(seed=42)
    options = HeatmapOptions(
        center=pet.last_seen_location,
        radius_km=1.5,
        zoom_level=16,
        time_elapsed=5,
        pet_size="medium",
        terrain_type="residential",
    )
    heatmap = generator.generate_detailed_heatmap(options)
    heatmap = generator.update_heatmap_with_sighting(heatmap, GeoPoint(35.6600, 139.7000), confidence=0.7)
    export_heatmap_geojson(heatmap, f"{output_dir}/heatmap.geojson")
    visualize_heatmap(heatmap, center=pet.last_seen_location, output_file=f"{output_dir}/heatmap.png")

    # 4. Overall chance of finding the pet.
    calculator = ProbabilityCalculator()
    result = calculator.calculate_discovery_probability(pet, ProbabilityFactors(
        time_elapsed=5,
        weather_condition="cloudy",
        search_area_size=3,
        volunteer_count=4,
        sighting_count=1,
        has_collar=True,
    ))
    log.info(f"Discovery probability: {result.probability:.1%}")
    for recommendation in result.recommendations:
        log.info(f"Recommendation: {recommendation}")

    log.info("--- Search Planning Example Finished ---")


if __name__ == "__main__":
    run_search_planning_example()
