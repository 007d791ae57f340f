"""
Global configuration and constants for the Vector-Aware Climate Outlier Detection system.
"""

# --- Magnitude Screening ---
DEFAULT_MAGNITUDE_THRESHOLD = 2.5   # Deviation score (std units) above which a point is a candidate
MAGNITUDE_THRESHOLD_RANGE = (1.5, 4.0, 0.1)   # (min, max, step) exposed in the UI

# --- Spatial Neighborhood ---
DEFAULT_SPATIAL_RADIUS_DEG = 0.5    # Euclidean search radius in (lat, lon) degrees
SPATIAL_RADIUS_RANGE = (0.1, 2.0, 0.1)
DEFAULT_MINIMUM_NEIGHBORS = 3       # Fewer neighbors than this -> not enough evidence
MINIMUM_NEIGHBORS_RANGE = (1, 10)
DEFAULT_NEIGHBOR_INDEX = "kdtree"   # "brute" | "grid" | "kdtree"
NEIGHBOR_INDEX_STRATEGIES = ("brute", "grid", "kdtree")

# --- Directional Consistency ---
COHERENCE_THRESHOLD = 0.5           # Cosine similarity above which a candidate is coherent (~60 deg)

# --- Confidence Scoring ---
# coherent:      confidence = COHERENT_BASE + COHERENT_SLOPE * consistency      -> (0.9, 1.0]
# not coherent:  confidence = INCOHERENT_BASE - INCOHERENT_SLOPE * consistency  -> [0.2, 0.5]
COHERENT_CONFIDENCE_BASE = 0.8
COHERENT_CONFIDENCE_SLOPE = 0.2
INCOHERENT_CONFIDENCE_BASE = 0.3
INCOHERENT_CONFIDENCE_SLOPE = 0.2
UNCHECKED_CONFIDENCE = 0.7          # Directional check disabled: every candidate is kept

# --- Ingestion ---
EXPECTED_HEADERS = ("Lat", "Lon", "Year", "Month", "Date", "WS10M", "WD10M", "QV2M", "Prec")
INGESTION_CHUNK_SIZE = 1000         # Rows parsed between progress reports
PROGRESS_REPORT_MIN_LINES = 5000    # Only report progress for inputs larger than this
LARGE_DATASET_LINES = 50000         # Warn above this many lines
LARGE_FILE_BYTES = 10 * 1024 * 1024 # Warn above 10 MiB

# --- Export ---
EXPORT_FILENAME = "climate_anomalies_results.csv"
EXPORT_HEADER = (
    "Index", "Lat", "Lon", "Year", "Month", "Date", "Precipitation",
    "Wind_Speed", "Wind_Direction", "Z_Score", "Neighbors",
    "Directional_Consistency", "Is_True_Anomaly", "Confidence",
)
EXPORT_DECIMALS = 3

# --- Presentation ---
RESULTS_PREVIEW_LIMIT = 20          # Rows shown in the results table before "export for more"
DATA_PREVIEW_ROWS = 10              # Rows shown in the dataset sample table
CACHE_MAX_ENTRIES = 8               # Max entries for cached parsing in the UI
WIND_ARROW_SCALE_DEG = 0.05         # Degrees of arrow length per m/s on the wind field plot

# --- Synthetic Data ---
SAMPLE_GRID_ORIGIN = (29.0, 79.0)   # (lat, lon) of the south-west grid corner
SAMPLE_GRID_STEP_DEG = 0.25
SAMPLE_START_YEAR = 1981

# --- Logging ---
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
LOG_LEVEL = "INFO"
