from setuptools import find_packages, setup

extras_require = {
    "spark": ["pyspark >=3.3"],
    "repr": ["pandas >=1.2"],
    "test": ["pytest", "pandas >=1.2"],
}
extras_require["complete"] = sorted({v for req in extras_require.values() for v in req})

with open("README.md") as f:
    long_description = f.read()

setup(
    name="python-drm",
    description=(
        "Distributed row matrices: lazily sized, partitioned row collections with "
        "elementwise scalar expressions"
    ),
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(),
    python_requires=">=3.8",
    install_requires=[
        "numpy >=1.21",
        "scipy >=1.8",
        "donfig >=0.6",
        "pyyaml >=5.4",
    ],
    extras_require=extras_require,
    package_data={"drm": ["drm.yaml"]},
    include_package_data=True,
    license="Apache License 2.0",
    keywords=["matrix", "sparse", "distributed", "spark", "linear algebra"],
    classifiers=[
        "Development Status :: 3 - Alpha",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3 :: Only",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering",
        "Topic :: Scientific/Engineering :: Mathematics",
    ],
    zip_safe=False,
)
