"""
Vector-Aware Climate Outlier Detection — Streamlit Interface.

Run with:  streamlit run main.py
"""

import sys
import os
import logging

# Ensure the project root is on the Python path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

import streamlit as st

from analysis.summary import dataset_overview, results_summary
from data.export import results_to_csv_bytes
from data.ingestion import IngestionError, content_fingerprint, parse_observations
from data.sample_data import generate_climate_dataset, observations_to_csv_text
from detection.errors import DetectionError
from detection.pipeline import run_detection
from detection.settings import DetectionConfig
from detection.statistics import precipitation_statistics
from visualization.plots import (
    create_precipitation_map,
    create_wind_field_figure,
    create_precipitation_histogram,
    create_confidence_profile,
)
from config import (
    DEFAULT_MAGNITUDE_THRESHOLD,
    DEFAULT_SPATIAL_RADIUS_DEG,
    DEFAULT_MINIMUM_NEIGHBORS,
    DEFAULT_NEIGHBOR_INDEX,
    MAGNITUDE_THRESHOLD_RANGE,
    SPATIAL_RADIUS_RANGE,
    MINIMUM_NEIGHBORS_RANGE,
    NEIGHBOR_INDEX_STRATEGIES,
    EXPECTED_HEADERS,
    EXPORT_FILENAME,
    RESULTS_PREVIEW_LIMIT,
    DATA_PREVIEW_ROWS,
    CACHE_MAX_ENTRIES,
    LARGE_FILE_BYTES,
    LOG_FORMAT,
    LOG_LEVEL,
)

logging.basicConfig(format=LOG_FORMAT, level=LOG_LEVEL)

# ── Page Config ──────────────────────────────────────────────────────────────

st.set_page_config(
    page_title="Climate Outlier Detection",
    page_icon="🌧️",
    layout="wide",
)

st.title("Vector-Aware Climate Outlier Detection")
st.markdown(
    "Flags anomalous precipitation readings, then uses directional consistency "
    "of the surrounding wind field to separate real weather events from noise."
)


@st.cache_data(max_entries=CACHE_MAX_ENTRIES)
def cached_parse(text: str):
    """Cached wrapper around parse_observations keyed on the file contents."""
    return parse_observations(text)


if "observations" not in st.session_state:
    st.session_state.observations = []
if "report" not in st.session_state:
    st.session_state.report = None

tab_upload, tab_visualize, tab_detect, tab_results = st.tabs(
    ["Upload", "Visualize", "Detect", "Results"]
)

# ── Upload ───────────────────────────────────────────────────────────────────

with tab_upload:
    uploaded = st.file_uploader("Upload Climate Data (CSV)", type=["csv", "txt", "tsv"])
    col_demo, _ = st.columns([1, 3])
    load_demo = col_demo.button("Load synthetic sample")

    if uploaded is not None:
        if uploaded.size > LARGE_FILE_BYTES:
            st.info("Large file detected. This may take a while to process...")
        try:
            with st.spinner("Processing your data..."):
                raw = uploaded.getvalue()
                observations = cached_parse(raw.decode("utf-8"))
        except (IngestionError, UnicodeDecodeError) as exc:
            st.error(f"Upload failed: {exc}")
        else:
            # Same name and size can still be a different file
            upload_key = content_fingerprint(raw)
            if st.session_state.get("upload_key") != upload_key:
                st.session_state.upload_key = upload_key
                st.session_state.observations = observations
                st.session_state.report = None
            st.success(f"Processed {len(observations):,} data points")

    if load_demo:
        st.session_state.observations = generate_climate_dataset()["observations"]
        st.session_state.report = None
        st.success(f"Loaded {len(st.session_state.observations):,} synthetic data points")

    st.subheader("Expected CSV Format")
    st.code(
        ",".join(EXPECTED_HEADERS) + "\n"
        "29,79,1981,1,5,2.88,107.31,6.65,0.29\n"
        "29,79,1981,1,6,2.03,197.62,6.47,6.21\n"
        "...",
        language="text",
    )
    st.caption(
        "Lat/Lon: geographic coordinates · WS10M: wind speed at 10 m · "
        "WD10M: wind direction at 10 m · QV2M: specific humidity at 2 m · "
        "Prec: precipitation"
    )
    if st.session_state.observations:
        st.download_button(
            "Download current dataset as CSV",
            data=observations_to_csv_text(st.session_state.observations),
            file_name="climate_data.csv",
            mime="text/csv",
        )

observations = st.session_state.observations

# ── Visualize ────────────────────────────────────────────────────────────────

with tab_visualize:
    if not observations:
        st.info("No data to visualize. Please upload a CSV file first.")
    else:
        overview = dataset_overview(observations)
        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Total Data Points", f"{overview['total_points']:,}",
                  delta=f"{overview['unique_locations']} unique locations", delta_color="off")
        m2.metric("Avg Precipitation", f"{overview['avg_precipitation']:.2f} mm")
        m3.metric("Avg Wind Speed", f"{overview['avg_wind_speed']:.2f} m/s")
        m4.metric("Avg Humidity", f"{overview['avg_humidity']:.2f} g/kg")

        g1, g2 = st.columns(2)
        g1.markdown(
            f"**Geographic Coverage** — Lat {overview['min_lat']:.2f}° to "
            f"{overview['max_lat']:.2f}°, Lon {overview['min_lon']:.2f}° to "
            f"{overview['max_lon']:.2f}°"
        )
        g2.markdown(
            f"**Temporal Coverage** — {overview['year_start']} to {overview['year_end']} "
            f"({overview['years_spanned']} years)"
        )

        st.plotly_chart(create_precipitation_map(observations), use_container_width=True)
        st.plotly_chart(create_wind_field_figure(observations), use_container_width=True)

        st.subheader(f"Data Sample (First {DATA_PREVIEW_ROWS} Records)")
        st.dataframe(
            [
                {
                    "Lat": o.lat, "Lon": o.lon,
                    "Date": f"{o.month}/{o.day}/{o.year}",
                    "Wind Speed": o.wind_speed, "Wind Dir": o.wind_direction_deg,
                    "Humidity": o.specific_humidity, "Precipitation": o.precipitation,
                }
                for o in observations[:DATA_PREVIEW_ROWS]
            ],
            use_container_width=True,
        )

# ── Detect ───────────────────────────────────────────────────────────────────

with tab_detect:
    if not observations:
        st.info("Please upload data first.")
    else:
        st.subheader("Detection Configuration")
        c1, c2 = st.columns(2)
        t_min, t_max, t_step = MAGNITUDE_THRESHOLD_RANGE
        threshold = c1.slider("Z-Score Threshold", t_min, t_max,
                              DEFAULT_MAGNITUDE_THRESHOLD, t_step)
        r_min, r_max, r_step = SPATIAL_RADIUS_RANGE
        radius = c1.slider("Spatial Radius (degrees)", r_min, r_max,
                           DEFAULT_SPATIAL_RADIUS_DEG, r_step)
        n_min, n_max = MINIMUM_NEIGHBORS_RANGE
        min_neighbors = c1.slider("Minimum Neighbors", n_min, n_max,
                                  DEFAULT_MINIMUM_NEIGHBORS, 1)

        use_directional = c2.toggle("Enable Directional Consistency", value=True)
        use_seasonal = c2.toggle(
            "Enable Seasonal Decomposition",
            value=False,
            help="Reserved: no seasonal model is applied yet.",
        )
        index_strategy = c2.selectbox(
            "Spatial Index",
            NEIGHBOR_INDEX_STRATEGIES,
            index=NEIGHBOR_INDEX_STRATEGIES.index(DEFAULT_NEIGHBOR_INDEX),
        )

        stats = precipitation_statistics(observations)
        s1, s2, s3 = st.columns(3)
        s1.metric("Mean Precipitation", f"{stats.mean:.2f} mm")
        s2.metric("Std Deviation", f"{stats.std:.2f} mm")
        s3.metric("Median", f"{stats.median:.2f} mm")
        st.plotly_chart(
            create_precipitation_histogram(observations, stats, threshold),
            use_container_width=True,
        )

        if st.button("Run Detection", type="primary"):
            config = DetectionConfig(
                magnitude_threshold=threshold,
                spatial_radius=radius,
                minimum_neighbors=int(min_neighbors),
                enable_directional_consistency=use_directional,
                enable_seasonal_decomposition=use_seasonal,
                neighbor_index=index_strategy,
            )
            try:
                with st.spinner("Running two-stage detection..."):
                    report = run_detection(observations, config)
            except DetectionError as exc:
                st.error(f"Detection failed: {exc}")
            else:
                st.session_state.report = report
                st.success(
                    f"Found {len(report.results)} anomalies "
                    f"({len(report.true_anomalies)} marked as true)"
                )

# ── Results ──────────────────────────────────────────────────────────────────

with tab_results:
    report = st.session_state.report
    if report is None or not report.results:
        st.info("No anomalies detected yet. Run the detection algorithm first.")
    else:
        results = report.results
        summary = results_summary(results)

        m1, m2, m3, m4 = st.columns(4)
        m1.metric("Total Anomalies", summary["total"],
                  delta=f"out of {len(observations):,} points", delta_color="off")
        m2.metric("True Anomalies", summary["true_count"],
                  delta=f"{summary['true_percentage']:.1f}% of detected", delta_color="off")
        m3.metric("False Anomalies", summary["false_count"],
                  delta="filtered out by vector analysis", delta_color="off")
        m4.metric("Avg Confidence", f"{summary['avg_confidence']:.1%}")

        p1, p2, p3 = st.columns(3)
        p1.metric("Avg Z-Score", f"{summary['avg_deviation_score']:.2f}")
        consistency = summary["avg_directional_consistency"]
        p2.metric("Avg Directional Consistency",
                  "N/A" if consistency is None else f"{consistency:.3f}")
        p3.metric("Run Time", f"{report.elapsed_s * 1000:.0f} ms")

        st.plotly_chart(create_confidence_profile(results), use_container_width=True)
        st.plotly_chart(create_precipitation_map(observations, results),
                        use_container_width=True)
        st.plotly_chart(create_wind_field_figure(observations, results),
                        use_container_width=True)

        st.subheader("Detailed Anomaly Results")
        st.download_button(
            "Export CSV",
            data=results_to_csv_bytes(results),
            file_name=EXPORT_FILENAME,
            mime="text/csv",
        )
        st.dataframe(
            [
                {
                    "Rank": rank + 1,
                    "Location": f"{r.lat}°, {r.lon}°",
                    "Date": f"{r.observation.month}/{r.observation.day}/{r.observation.year}",
                    "Precipitation (mm)": round(r.precipitation, 2),
                    "Z-Score": round(r.deviation_score, 2),
                    "Neighbors": r.neighbor_count,
                    "Consistency": (
                        "N/A" if r.directional_consistency is None
                        else f"{r.directional_consistency:.3f}"
                    ),
                    "Verdict": "True" if r.is_true_anomaly else "False",
                    "Confidence": f"{r.confidence:.1%}",
                }
                for rank, r in enumerate(results[:RESULTS_PREVIEW_LIMIT])
            ],
            use_container_width=True,
        )
        if len(results) > RESULTS_PREVIEW_LIMIT:
            st.caption(
                f"Showing first {RESULTS_PREVIEW_LIMIT} of {len(results)} anomalies. "
                "Export CSV for complete results."
            )

# ── Info Panel ───────────────────────────────────────────────────────────────

with st.expander("About the Model"):
    st.markdown(
        """
        **Stage 1 — Magnitude Screening.** Each observation's precipitation is
        scored as `|prec - mean| / std` (population std over the whole
        dataset). Observations above the Z-score threshold become candidates.
        A constant precipitation field produces no candidates.

        **Stage 2 — Directional Consistency.** Wind speed and direction are
        converted to vectors `u = ws·cos(wd)`, `v = ws·sin(wd)`. For each
        candidate, neighbors within the spatial radius (excluding records at
        the same coordinates) are averaged into a mean wind vector. The cosine
        similarity between the candidate's vector and that mean is its
        directional consistency; above 0.5 (~60°) the candidate is coherent.

        **Confidence.** Coherent candidates are true anomalies with confidence
        `0.8 + 0.2·c` (0.9–1.0). Incoherent ones are filtered as noise with
        confidence `0.3 - 0.2·c` (0.2–0.5). Too few neighbors or calm wind
        gives `c = 0`. With the directional check disabled every candidate is
        kept at confidence 0.7.
        """
    )
