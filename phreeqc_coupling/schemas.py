"""
Setup schemas for the PHREEQC coupling core

Pydantic models describing one chemical solver setup. The factory turns a
validated ChemicalSolverConfig into the entity model and a PhreeqcCoupler.
"""

from typing import Dict, List, Literal, Optional
from pydantic import BaseModel, Field, validator

from .core_config import CONFIG


class ComponentConfig(BaseModel):
    """Aqueous component total"""
    name: str = Field(..., description="Element or master species name, e.g. 'Ca' or 'C(4)'")
    amount: float = Field(0.0, description="Initial amount in mol/kgw", ge=0)
    chemical_formula: str = Field("", description="Optional 'as' formula")


class AqueousSolutionConfig(BaseModel):
    """Initial aqueous solution, copied into every chemical system"""
    components: List[ComponentConfig] = Field(default_factory=list)
    pH: float = Field(CONFIG.DEFAULT_PH, description="pH value", ge=0, le=14)
    pe: float = Field(CONFIG.DEFAULT_PE, description="pe value")
    temperature: float = Field(CONFIG.DEFAULT_TEMPERATURE_C, description="Temperature in Celsius", ge=0, le=350)
    pressure: float = Field(CONFIG.DEFAULT_PRESSURE_ATM, description="Pressure in atm", gt=0)
    means_of_adjusting_charge: Literal["pH", "pe", "unspecified"] = Field(
        "unspecified",
        description="Quantity PHREEQC adjusts to reach charge balance"
    )

    @validator('components')
    def validate_unique_components(cls, v):
        """Component names identify transport variables and result columns."""
        names = [c.name for c in v]
        duplicates = sorted(set(n for n in names if names.count(n) > 1))
        if duplicates:
            raise ValueError(f"Duplicate component names: {', '.join(duplicates)}")
        return v


class EquilibriumPhaseConfig(BaseModel):
    name: str
    initial_amount: float = Field(0.0, description="Initial moles at every node", ge=0)
    saturation_index: float = Field(0.0, description="Target saturation index")


class KineticReactantConfig(BaseModel):
    name: str
    initial_amount: float = Field(0.0, description="Initial moles at every node", ge=0)
    parameters: List[float] = Field(default_factory=list, description="Values passed as PARM(i)")
    chemical_formula: str = ""


class ReactionRateConfig(BaseModel):
    """BASIC rate statements, numbered automatically"""
    kinetic_reactant: str
    statements: List[str] = Field(..., min_length=1)


class SurfaceSiteConfig(BaseModel):
    name: str
    site_density: float = Field(..., description="Sites per nm2", gt=0)
    specific_surface_area: float = Field(..., description="m2/g", gt=0)
    mass: float = Field(..., description="Grams of sorbent", gt=0)


class UserPunchConfig(BaseModel):
    """Secondary variables computed by USER_PUNCH, one heading each"""
    headings: List[str] = Field(..., min_length=1)
    statements: List[str] = Field(..., min_length=1)

    @validator('headings')
    def validate_unique_headings(cls, v):
        if len(set(v)) != len(v):
            raise ValueError("USER_PUNCH headings must be unique")
        return v


class KnobsConfig(BaseModel):
    max_iter: int = Field(CONFIG.DEFAULT_MAX_ITER, gt=0)
    relative_convergence_tolerance: float = Field(CONFIG.DEFAULT_RELATIVE_CONVERGENCE_TOLERANCE, gt=0)
    tolerance: float = Field(CONFIG.DEFAULT_TOLERANCE, gt=0)
    step_size: float = Field(CONFIG.DEFAULT_STEP_SIZE, gt=1)
    scaling: bool = CONFIG.DEFAULT_SCALING


class OutputConfig(BaseModel):
    """Identifier columns of the selected-output table (all of them are dropped)"""
    use_high_precision: bool = True
    display_simulation_id: bool = False
    display_state: bool = False
    display_solution_id: bool = True
    display_distance: bool = False
    display_current_time: bool = False
    display_time_step: bool = False


class ChemicalSolverConfig(BaseModel):
    """Complete setup of one PHREEQC-coupled chemical solver"""

    # Files and engine
    project_file_name: str = Field(..., description="Prefix of the generated input, result and dump files")
    output_directory: str = Field(".", description="Directory the engine files are written to")
    database: Optional[str] = Field(None, description="Database path or name; default phreeqc.dat")
    phreeqc_exe: Optional[str] = Field(None, description="PHREEQC executable; default searched")
    enable_dump: bool = Field(False, description="Carry solution composition across steps via DUMP")

    # Chemistry
    aqueous_solution: AqueousSolutionConfig
    equilibrium_phases: List[EquilibriumPhaseConfig] = Field(default_factory=list)
    kinetic_reactants: List[KineticReactantConfig] = Field(default_factory=list)
    reaction_rates: List[ReactionRateConfig] = Field(default_factory=list)
    surface: List[SurfaceSiteConfig] = Field(default_factory=list)
    user_punch: Optional[UserPunchConfig] = None
    knobs: KnobsConfig = Field(default_factory=KnobsConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    # Transport coupling
    hydrogen_component: str = Field(
        CONFIG.HYDROGEN_COMPONENT,
        description="Transport variable whose concentration stands for pH"
    )
    process_variables: Dict[int, str] = Field(
        default_factory=dict,
        description="Component name carried by each transport process id"
    )

    @validator('equilibrium_phases', 'kinetic_reactants')
    def validate_unique_names(cls, v):
        names = [item.name for item in v]
        if len(set(names)) != len(names):
            raise ValueError("Names must be unique")
        return v

    @validator('reaction_rates')
    def validate_rates_have_reactant(cls, v, values):
        """A rate for a reactant that is not configured would never be used."""
        reactant_names = {r.name for r in values.get('kinetic_reactants', [])}
        unknown = [rate.kinetic_reactant for rate in v if rate.kinetic_reactant not in reactant_names]
        if unknown:
            raise ValueError(f"Reaction rates without a kinetic reactant: {', '.join(unknown)}")
        return v

    @validator('process_variables')
    def validate_process_variables(cls, v, values):
        """Every transport variable must map onto a component or onto pH."""
        aqueous_solution = values.get('aqueous_solution')
        if aqueous_solution is None:
            return v
        known = {c.name for c in aqueous_solution.components}
        known.add(values.get('hydrogen_component', CONFIG.HYDROGEN_COMPONENT))

        for process_id, name in v.items():
            if process_id < 0:
                raise ValueError(f"Process id must be non-negative, got {process_id}")
            if name not in known:
                raise ValueError(
                    f"Process variable '{name}' (process {process_id}) is neither a "
                    f"component nor the hydrogen component"
                )
        return v

    def component_names(self) -> List[str]:
        return [c.name for c in self.aqueous_solution.components]
