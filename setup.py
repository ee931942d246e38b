from setuptools import setup, find_namespace_packages

setup(
    name="caps-dashboard",
    version="1.0.0",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src"),
    install_requires=[
        "pandas>=2.1.0",
        "numpy>=1.26.0",
        "sqlalchemy>=2.0.19",
        "psycopg2-binary>=2.9.6",
        "python-dotenv>=1.0.0",
        "streamlit>=1.31.0",
        "plotly>=5.18.0",
    ],
    extras_require={
        "test": ["pytest>=8.0.0"],
    },
    python_requires=">=3.10",
)
