from setuptools import setup, find_packages

setup(
    name="dbpane",
    version="1.0.0",
    description="DBPane — multi-pane terminal browser for databases, tables and ad-hoc queries",
    packages=find_packages(exclude=["tests*", "*.egg-info"]),
    py_modules=["main", "config"],
    python_requires=">=3.10",
    install_requires=[
        "rich>=13.7.0",
        "prompt_toolkit>=3.0.43",
        "psycopg2-binary>=2.9.9",
        "mysql-connector-python>=8.3.0",
        "python-dotenv>=1.0.0",
        "pydantic>=2.5.0",
        "pydantic-settings>=2.1.0",
        "loguru>=0.7.2",
        "click>=8.1.7",
    ],
    extras_require={
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dbpane=main:cli",
        ],
    },
)
