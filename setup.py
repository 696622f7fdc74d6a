from setuptools import setup, find_packages

setup(
    name='tailvar',
    version='0.1',
    packages=find_packages(exclude=['tests', 'tests.*']),
    install_requires=[
        'numpy>=1.22',
        'pandas>=1.4',
        'scipy>=1.8',
        'arch>=7.0',
        'statsmodels>=0.12'
    ],
    extras_require={
        'test': ['pytest>=7.0']
    },
    description='tailvar: VaR and Expected Shortfall of commodity returns with Student-t, EVT and GARCH models',
    license='MIT',
    python_requires='>=3.8'
)
