import streamlit as st
import pandas as pd
import numpy as np
import matplotlib.pyplot as plt

import config
import plots
from cleaning import missing_summary
from modeling import ModelFitError, design_vif, significant_terms
from pipeline import run_from_file
from rankings import COMBINED_RANK, RATING_RANK, SALES_RANK, top_titles
from schema import GENRE, PLATFORM, SchemaError

# --- Streamlit Page Configuration ---
st.set_page_config(
    page_title="Video Game Ratings & Sales", # Title displayed in the browser tab
    page_icon="🎮", # Icon displayed in the browser tab
    layout="wide", # Use wide layout for the wide ranking tables
    initial_sidebar_state="expanded"
)

MODEL_LABELS = {
    "sales": "Critic Rating ~ Total Sales",
    "platform": "Critic Score ~ Platform",
    "genre": "Critic Score ~ Genre",
}


# --- Pipeline Run ---
@st.cache_resource(show_spinner="Running the analysis pipeline...")
def run_analysis(path, legacy_or):
    """
    Runs the full pipeline once per (path, filter mode) and caches the result,
    so switching sections does not reload or refit anything.
    """
    return run_from_file(path, legacy_or=legacy_or)


def load_results(path, legacy_or):
    """Runs the pipeline and reports load/schema/model failures in the page."""
    try:
        return run_analysis(path, legacy_or)
    except FileNotFoundError:
        st.error(f"Error: '{path}' not found. Please make sure the dataset is in the correct directory.")
    except SchemaError as e:
        st.error(f"The dataset does not have the expected columns: {e}")
    except ModelFitError as e:
        st.error(f"A regression could not be fitted: {e}")
    return None


def show_figure(fig):
    """Renders a figure in the page and closes it; every rerun builds new ones."""
    st.pyplot(fig)
    plt.close(fig)


def show_dataset_overview(result):
    st.header("Dataset Overview")
    raw = result.raw
    st.write(f"Dataset shape: {raw.shape} (Rows: {raw.shape[0]}, Columns: {raw.shape[1]})")
    st.write("First 5 rows of the dataset:")
    st.dataframe(raw.head())

    st.write("### Data Types")
    st.dataframe(raw.dtypes.astype(str).rename('Data Type').reset_index().rename(columns={'index': 'Column'}))

    st.write("### Cleaning Steps")
    col1, col2, col3 = st.columns(3)
    col1.metric("Raw rows", len(raw))
    col2.metric(f"Released {config.MIN_YEAR}+ on kept platforms", len(result.filtered))
    col3.metric("Platforms kept", result.filtered[PLATFORM].nunique())

    st.write("### Missing Scores")
    before, after = st.columns(2)
    before.write("Before imputation")
    before.dataframe(missing_summary(result.normalized))
    after.write("After group-mean imputation")
    after.dataframe(missing_summary(result.imputed))
    st.info("Missing critic and user scores are filled with the mean of games sharing the same "
            "genre, platform and release year. Groups without any complete row stay empty.")


def show_exploratory(result):
    st.header("Exploratory Data Analysis")
    option = st.selectbox("Choose a chart:", [
        "Sales by Platform",
        "Sales by Genre",
        "Score Distributions",
        "Critic Score by Platform",
        "Critic Score by Genre",
        "Critic vs User Score",
    ])
    if option == "Sales by Platform":
        show_figure(plots.sales_by_platform(result.imputed))
    elif option == "Sales by Genre":
        show_figure(plots.sales_by_genre(result.imputed))
    elif option == "Score Distributions":
        show_figure(plots.score_distributions(result.normalized, result.imputed))
    elif option == "Critic Score by Platform":
        show_figure(plots.score_boxplot(result.imputed, PLATFORM))
    elif option == "Critic Score by Genre":
        show_figure(plots.score_boxplot(result.imputed, GENRE))
    else:
        show_figure(plots.critic_vs_user(result.imputed))


def show_rankings(result):
    st.header("Rankings")
    n = st.slider("Number of titles", min_value=5, max_value=50, value=config.TOP_N)
    tab_sales, tab_rating, tab_combined = st.tabs(["By Sales", "By Critic Rating", "Combined"])
    with tab_sales:
        st.dataframe(top_titles(result.sales, SALES_RANK, n))
    with tab_rating:
        st.caption(f"Only platform releases with more than {config.MIN_CRITIC_COUNT} critic review count.")
        st.dataframe(top_titles(result.ratings, RATING_RANK, n))
    with tab_combined:
        st.caption("Sum of the sales rank and the rating rank, re-ranked so 1 is best on both.")
        st.dataframe(top_titles(result.combined, COMBINED_RANK, n))
        show_figure(plots.top_ranked(result.combined, n))


def show_models(result):
    st.header("Model Building")
    key = st.selectbox("Select Model:", list(MODEL_LABELS), format_func=MODEL_LABELS.get)
    fit = result.models[key]
    st.code(fit.formula)

    metrics = fit.metrics
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Observations", metrics["n_obs"])
    col2.metric("R² Score", f"{metrics['r_squared']:.3f}")
    col3.metric("Adjusted R²", f"{metrics['adj_r_squared']:.3f}" if not np.isnan(metrics['adj_r_squared']) else "N/A")
    col4.metric("RMSE", f"{metrics['rmse']:.3f}")

    st.subheader("Coefficients")
    st.dataframe(fit.coefficients.round(4))
    show_figure(plots.coefficient_plot(fit))

    if key != "sales" and st.checkbox("Show VIF for the dummy columns"):
        st.dataframe(design_vif(fit))

    st.subheader("Regression Diagnostics")
    show_figure(plots.model_diagnostics(fit))


def show_summary(result):
    st.header("Results Summary")
    best = result.combined.nsmallest(1, COMBINED_RANK)
    if not best.empty:
        row = best.iloc[0]
        st.markdown(f"**Best combined title:** {row['Name']} "
                    f"(sales rank {row[SALES_RANK]}, rating rank {row[RATING_RANK]})")

    rows = []
    for key, fit in result.models.items():
        rows.append({
            "Model": MODEL_LABELS[key],
            "n": fit.metrics["n_obs"],
            "R²": round(fit.metrics["r_squared"], 3),
            "Significant terms": len(significant_terms(fit)),
        })
    st.dataframe(pd.DataFrame(rows))
    sales_fit = result.models.get("sales")
    if sales_fit is not None:
        slope = sales_fit.coefficients.loc["total_sales"]
        direction = "rises" if slope["coef"] > 0 else "falls"
        st.markdown(f"- The mean critic rating of a title {direction} by `{abs(slope['coef']):.2f}` points per "
                    f"million units sold (p = `{slope['p_value']:.4f}`, R² = `{sales_fit.metrics['r_squared']:.3f}`).")
    st.markdown("- Platform and genre coefficients are relative to the reference level, "
                "the first platform / genre in alphabetical order.")


# --- Main Streamlit Application Logic ---
def main():
    st.title("🎮 Video Game Ratings & Sales Analysis")
    st.markdown("""
    Sales and review scores of games released since 2000: cleaning and imputation, per-title
    rankings on sales and critic rating, and linear models relating ratings to sales, platform and genre.
    """)

    st.sidebar.title("Navigation")
    app_mode = st.sidebar.radio("Go to", [
        "Dataset Overview",
        "Exploratory Analysis",
        "Rankings",
        "Model Building",
        "Results Summary",
    ])
    path = st.sidebar.text_input("Dataset path", config.DATA_PATH)
    legacy_or = st.sidebar.checkbox("Legacy year OR 'tbd' filter", value=config.LEGACY_OR_FILTER)

    result = load_results(path, legacy_or)
    if result is None:
        return

    if app_mode == "Dataset Overview":
        show_dataset_overview(result)
    elif app_mode == "Exploratory Analysis":
        show_exploratory(result)
    elif app_mode == "Rankings":
        show_rankings(result)
    elif app_mode == "Model Building":
        show_models(result)
    else:
        show_summary(result)


# --- Entry point for the Streamlit application ---
if __name__ == "__main__":
    main()
