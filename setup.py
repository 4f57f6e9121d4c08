"""
Setup script for SimStat package.
"""

from setuptools import setup, find_packages
import os

# Read the README file for long description
readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
if os.path.exists(readme_path):
    with open(readme_path, 'r', encoding='utf-8') as f:
        long_description = f.read()
else:
    long_description = "SimStat: online mean and standard error for simulation observables"

# Read requirements
requirements = [
    'numpy>=1.24.0',
]

# Development requirements
dev_requirements = [
    'pytest>=6.0.0',
]

# MPI-backed reductions; needs an MPI implementation on the system
mpi_requirements = [
    'mpi4py>=3.1.0',
]

setup(
    name='simstat',
    version='0.1.0',
    description='Online mean and standard error for simulation observables, serial or over MPI',
    long_description=long_description,
    long_description_content_type='text/markdown',
    author='SimStat Development Team',
    packages=find_packages(where='src'),
    package_dir={'': 'src'},
    python_requires='>=3.9',
    install_requires=requirements,
    extras_require={
        'dev': dev_requirements,
        'test': dev_requirements,
        'mpi': mpi_requirements,
        'all': requirements + dev_requirements + mpi_requirements,
    },
    classifiers=[
        'Development Status :: 3 - Alpha',
        'Intended Audience :: Science/Research',
        'License :: OSI Approved :: GNU General Public License v3 or later (GPLv3+)',
        'Operating System :: OS Independent',
        'Programming Language :: Python :: 3',
        'Programming Language :: Python :: 3.9',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12',
        'Topic :: Scientific/Engineering :: Physics',
        'Topic :: Scientific/Engineering :: Mathematics',
    ],
    keywords='statistics, running mean, standard error, welford, mpi, monte carlo',
    include_package_data=True,
    zip_safe=False,
)
