import streamlit as st
import pandas as pd
import plotly.express as px

from prefix_trie import PrefixTrie
from prefix_trie.bench import BenchConfig, build_keys, run_benchmark, summarize

# Configure page
st.set_page_config(
    page_title="Prefix Trie Bench",
    page_icon="🌲",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Main title
st.title("🌲 Prefix Trie Bench")
st.markdown("---")

# Sidebar
with st.sidebar:
    st.header("Navigation")
    page = st.selectbox(
        "Choose a section:",
        ["Build", "Benchmark", "Query"]
    )

    st.markdown("---")
    st.subheader("Workload")
    workload = st.selectbox("Keys", ["words", "routes"])
    num_keys = st.number_input("Number of keys", min_value=1, max_value=200_000, value=5_000, step=1_000)
    prefix_freq = st.slider("Prefix frequency", 0.0, 1.0, 0.3, disabled=(workload != "words"))
    seed = st.number_input("Seed", min_value=0, value=42, step=1)

    if st.button("🔄 Rebuild Trie"):
        st.session_state.pop('trie', None)

config = BenchConfig(workload=workload, num_keys=int(num_keys), prefix_freq=prefix_freq, seed=int(seed))
config_key = (config.workload, config.num_keys, config.prefix_freq, config.seed)

if st.session_state.get('config_key') != config_key or 'trie' not in st.session_state:
    keys = build_keys(config)
    st.session_state['keys'] = keys
    st.session_state['trie'] = PrefixTrie(keys)
    st.session_state['config_key'] = config_key

trie = st.session_state['trie']
keys = st.session_state['keys']

# Main content area
if page == "Build":
    st.header("Trie Structure")

    stats = trie.get_stats()
    col1, col2, col3, col4 = st.columns(4)

    with col1:
        st.metric("Stored Strings", f"{stats.num_strings:,}")

    with col2:
        st.metric("Nodes", f"{stats.num_nodes:,}")

    with col3:
        st.metric("Avg / Max Depth", f"{stats.avg_depth:.2f} / {stats.max_depth}")

    with col4:
        st.metric("Memory (est.)", f"{stats.memory_bytes / 1024**2:.2f} MB")

    st.write(f"**Average branching factor:** {stats.avg_branching_factor:.3f}")

    lengths = pd.Series([len(k) for k in set(keys)], name="length")
    fig = px.histogram(lengths, x="length", title="Key Length Distribution")
    st.plotly_chart(fig, use_container_width=True)

    if stats.num_nodes <= 500:
        st.subheader("Tree")
        st.code(trie.visualize())
    else:
        st.info("Tree view is shown for tries up to 500 nodes")

elif page == "Benchmark":
    st.header("⏱️ Operation Latency")

    num_queries = st.slider("Queries per operation", 10, 2_000, 200)
    max_distance = st.slider("Fuzzy max distance", 0, 4, 1)

    if st.button("Run benchmark"):
        bench_config = BenchConfig(
            workload=config.workload,
            num_keys=config.num_keys,
            num_queries=num_queries,
            prefix_freq=config.prefix_freq,
            max_distance=max_distance,
            seed=config.seed,
        )
        df = run_benchmark(bench_config, keys=keys)
        summary = summarize(df)
        st.session_state['bench'] = (df, summary)

    if 'bench' in st.session_state:
        df, summary = st.session_state['bench']
        st.dataframe(summary, use_container_width=True)

        fig = px.bar(summary, x="operation", y=["p50_us", "p95_us", "p99_us"], barmode="group",
                     title="Latency Percentiles (µs)")
        st.plotly_chart(fig, use_container_width=True)

        df_us = df.assign(us=df["seconds"] * 1e6)
        fig_box = px.box(df_us, x="operation", y="us", log_y=True, title="Per-call Latency (µs)")
        st.plotly_chart(fig_box, use_container_width=True)
    else:
        st.info("👆 Press 'Run benchmark' to time the trie operations")

elif page == "Query":
    st.header("🔍 Query")

    tab1, tab2 = st.tabs(["Prefix", "Fuzzy"])

    with tab1:
        prefix = st.text_input("Prefix", value=keys[0][:2] if keys else "")
        limit = st.number_input("Max results", min_value=1, value=50)
        st.write(f"**{trie.count(prefix):,} strings** start with `{prefix}`")
        st.dataframe(pd.DataFrame({"match": sorted(trie.iter_prefix(prefix, k=int(limit)))}))

    with tab2:
        query = st.text_input("Query", value=keys[0] if keys else "")
        k = st.slider("Max distance", 0, 4, 1, key="fuzzy_k")
        results = trie.match_fuzzy(query, k)
        df = pd.DataFrame(results, columns=["match", "distance"]).sort_values(["distance", "match"])
        st.dataframe(df, use_container_width=True)

# Footer
st.markdown("---")
st.markdown(
    """
    <div style='text-align: center; color: #B0B0B0; padding: 1rem;'>
        Built with Streamlit 🚀 | Prefix Trie Bench
    </div>
    """,
    unsafe_allow_html=True
)
