from setuptools import setup, find_packages

__version__ = "0.1.0"

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="altitude-pid-tuning",
    version=__version__,
    author="Your Name",
    author_email="your.email@example.com",
    description="Altitude PID simulation, step response scoring and random-search autotuning",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/yourusername/altitude-pid-tuning",
    packages=find_packages(exclude=["tests", "tests.*", "examples", "examples.*"]),
    package_data={"controllers.config": ["*.yaml"]},
    include_package_data=True,
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
    ],
    python_requires=">=3.8",
    install_requires=[
        "numpy>=1.20.0",
        "matplotlib>=3.4.0",
        "pandas>=1.3.0",
        "pyyaml>=5.4",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=3.0.0",
            "black>=22.0.0",
            "flake8>=4.0.0",
            "mypy>=0.950",
        ],
    },
    zip_safe=False,
)
