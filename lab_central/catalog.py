# catalog.py
from typing import List

from lab_central.data_models import Equipment, EquipmentStatus

ENGINEERING_DEPARTMENTS: List[str] = [
    "Computer Science & Engineering",
    "Mechanical Engineering",
    "Civil Engineering",
    "Electrical & Electronics Engineering",
    "Electronics & Communication Engineering",
    "Information Technology",
    "Chemical Engineering",
    "Aerospace Engineering",
    "Biomedical Engineering",
    "Automobile Engineering",
    "Mechatronics Engineering",
    "Nanotechnology",
    "Materials Science & Engineering",
]

_IMAGE_URL = "https://images.unsplash.com/photo-{}?auto=format&fit=crop&q=80&w=800"


def build_initial_equipment() -> List[Equipment]:
    """The fixed inventory the store is seeded with at startup."""
    return [
        Equipment(
            id="eq-001",
            name="Scanning Electron Microscope (SEM)",
            category="Microscopy",
            lab_name="Nanotechnology Research Center",
            status=EquipmentStatus.AVAILABLE,
            description="High-resolution imaging of surfaces using a focused beam of electrons.",
            specifications=[
                "Resolution: 1.2nm @ 30kV",
                "Magnification: 10x to 1,000,000x",
                "Emitter: Schottky Field Emission",
                "Detectors: SE, BSE, EDS",
            ],
            hourly_rate=150,
            image=_IMAGE_URL.format("1581093588401-fbb62a02f120"),
            total_usage_hours=1240,
        ),
        Equipment(
            id="eq-002",
            name="NMR Spectrometer 400MHz",
            category="Spectroscopy",
            lab_name="Organic Chemistry Lab",
            status=EquipmentStatus.IN_USE,
            description="Analysis of molecular structure and dynamics of organic compounds.",
            specifications=[
                "Field strength: 9.4 Tesla",
                "Probe: 5mm BBO CryoProbe",
                "Autosampler: 24 positions",
                "Solvent suppression enabled",
            ],
            hourly_rate=85,
            image=_IMAGE_URL.format("1579154235828-ac01e5548046"),
            total_usage_hours=3500,
        ),
        Equipment(
            id="eq-003",
            name="Thermal Cycler (PCR)",
            category="Molecular Biology",
            lab_name="Genetics & Biotech Lab",
            status=EquipmentStatus.AVAILABLE,
            description="Rapid heating and cooling for DNA amplification via PCR.",
            specifications=[
                "Block format: 96-well 0.2ml",
                "Max ramp rate: 6.0 °C/sec",
                "Temperature range: 4°C - 99°C",
                "Touchscreen interface",
            ],
            hourly_rate=20,
            image=_IMAGE_URL.format("1581093196277-9f608ed386ea"),
            total_usage_hours=890,
        ),
        Equipment(
            id="eq-004",
            name="X-Ray Diffractometer (XRD)",
            category="Material Science",
            lab_name="Advanced Materials Lab",
            status=EquipmentStatus.MAINTENANCE,
            description="Used for phase identification of crystalline materials.",
            specifications=[
                "Anode: Copper (Cu-Kα)",
                "Goniometer: Theta-Theta vertical",
                "Detector: LynxEye XE-T",
                "Spinning stage available",
            ],
            hourly_rate=120,
            image=_IMAGE_URL.format("1518152006812-edab29b069ac"),
            total_usage_hours=1100,
        ),
        Equipment(
            id="eq-005",
            name="High Performance Liquid Chromatograph (HPLC)",
            category="Chromatography",
            lab_name="Analytical Chemistry Wing",
            status=EquipmentStatus.AVAILABLE,
            description="Separation, identification, and quantification of components in a mixture.",
            specifications=[
                "Pump: Quaternary Gradient",
                "Detector: Diode Array (PDA)",
                "Column Oven: Up to 80°C",
                "Injection vol: 0.1 to 100uL",
            ],
            hourly_rate=45,
            image=_IMAGE_URL.format("1532187863486-abf9b3c3b0fb"),
            total_usage_hours=2100,
        ),
        Equipment(
            id="eq-006",
            name="Confocal Laser Scanning Microscope",
            category="Microscopy",
            lab_name="Cell Biology Institute",
            status=EquipmentStatus.AVAILABLE,
            description="Advanced 3D imaging of fluorescently labeled biological samples.",
            specifications=[
                "Lasers: 405, 488, 561, 640nm",
                "Objectives: 10x, 20x, 40x, 63x Oil",
                "Z-stacking resolution: 50nm",
                "Incubation chamber for live cells",
            ],
            hourly_rate=180,
            image=_IMAGE_URL.format("1582719471384-894fbb16e074"),
            total_usage_hours=420,
        ),
        Equipment(
            id="eq-007",
            name="Atomic Force Microscope (AFM)",
            category="Microscopy",
            lab_name="Nanofabrication Facility",
            status=EquipmentStatus.AVAILABLE,
            description="Nanoscale surface topography and mechanical property mapping.",
            specifications=[
                "Modes: Tapping, Contact, PeakForce",
                "Scan range: 90um x 90um",
                "Vertical noise floor: < 0.03nm",
                "Fluid cell compatible",
            ],
            hourly_rate=200,
            image=_IMAGE_URL.format("1581093458791-9f3c3900df4b"),
            total_usage_hours=650,
        ),
        Equipment(
            id="eq-008",
            name="Mass Spectrometer (LC-MS/MS)",
            category="Spectroscopy",
            lab_name="Proteomics Research Lab",
            status=EquipmentStatus.IN_USE,
            description="High-sensitivity identification of proteins and small molecules.",
            specifications=[
                "Mass range: 50 - 6,000 m/z",
                "Resolution: 140,000 @ m/z 200",
                "Ion Source: Electrospray (ESI)",
                "Coupled with Nano-LC",
            ],
            hourly_rate=250,
            image=_IMAGE_URL.format("1576086213369-97a306d36557"),
            total_usage_hours=5200,
        ),
        Equipment(
            id="eq-009",
            name="Inductively Coupled Plasma (ICP-OES)",
            category="Spectroscopy",
            lab_name="Environmental Science Lab",
            status=EquipmentStatus.AVAILABLE,
            description="Detection of trace metals in environmental and geological samples.",
            specifications=[
                "RF Power: 750 - 1500 Watts",
                "Plasma viewing: Dual (Axial/Radial)",
                "Wavelength: 165 - 900nm",
                "Detection limit: ppb range",
            ],
            hourly_rate=75,
            image=_IMAGE_URL.format("1579684385127-1ef15d508118"),
            total_usage_hours=1800,
        ),
        Equipment(
            id="eq-010",
            name="Cryogenic Probe Station",
            category="Material Science",
            lab_name="Quantum Electronics Lab",
            status=EquipmentStatus.AVAILABLE,
            description="Electrical characterization of materials at cryogenic temperatures.",
            specifications=[
                "Temp Range: 4.2K to 400K",
                "Vacuum: 10^-6 mbar",
                "Probes: 6 micromanipulators",
                "Shielding: Radiation & EMI",
            ],
            hourly_rate=110,
            image=_IMAGE_URL.format("1562408590-e32931084e23"),
            total_usage_hours=320,
        ),
    ]
