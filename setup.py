import os.path
from setuptools import setup, find_packages

package_dir = "src"

about = {}
with open(os.path.join(package_dir, "iiifimage", "__about__.py")) as fp:
    exec(fp.read(), about)

setup(
    name=about["__tag__"],
    version=about["__version__"],
    description=about["__title__"] + ' - ' + about["__summary__"],
    long_description=about["__description__"],

    url=about["__uri__"],
    download_url=about["__source_uri__"],
    license=about["__license__"],
    platforms=about["__platforms__"],

    author=about["__author__"],
    author_email=about["__email__"],

    package_dir={"": package_dir},
    packages=find_packages(package_dir, exclude=["tests", "tests.*"]),
    test_suite="tests",
    python_requires=">=3.6",

    install_requires=[
        "Flask>=1.0.2",
        "Pillow>=8.0",
        "requests>=2.20,<3",
    ],

    extras_require={
        "memcached": [
            "pylibmc>=1.5.2",
        ],
        "test": [
            "coverage",
            "flake8",
            "pytest",
        ],
    },

    setup_requires=[
        "wheel",
    ],
)
