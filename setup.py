from setuptools import setup, find_packages

setup(
    name="pocketgraph",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src", exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2",
        "tenacity",
        "mirascope[openai]>=1,<2",
        "openai",
        "aiohttp",
        "numpy",
        "python-dotenv",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
    },
    python_requires=">=3.9",
    # Add metadata for PyPI
    author="kenneth cavanagh",
    author_email="ken@agency42.com",
    description="minimal graph engine for composing multi-step workflows from small nodes",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    url="https://github.com/k3nnethfrancis/pocketgraph",
)
