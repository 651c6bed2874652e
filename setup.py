from setuptools import setup, find_packages

setup(
    name="lfucache",
    version="1.0.0",
    description="A thread-safe approximate LFU cache with watermark batch eviction",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    author="lfucache Authors",
    packages=find_packages(exclude=["tests", "benchmarks"]),
    python_requires=">=3.8",
    install_requires=[
        "structlog>=23.1.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Caching",
    ],
    keywords="cache, caching, lfu, eviction, thread-safe",
)
