from setuptools import setup, find_packages

setup(
    name="hogan_middleware",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "aiohttp>=3.9.0",
        "aiofiles>=23.2.1",
        "pystache>=0.6.0",
        "watchdog>=3.0.0",
        "xxhash>=3.0.0",
        "pyyaml>=6.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "hogan-serve=hogan_middleware.main:run",
        ],
    },
)
