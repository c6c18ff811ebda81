from setuptools import setup, find_packages

setup(
    name="routexplore",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-dotenv",
        "pydantic>=2",
        "pydantic-settings",
        "polyline",
        "aiohttp",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
    python_requires=">=3.10",
)
