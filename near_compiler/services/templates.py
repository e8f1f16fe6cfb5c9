"""Built-in example contracts served by GET /templates."""

from typing import List

from ..models import ContractTemplate

HELLO_WORLD = r"""use near_sdk::borsh::{BorshDeserialize, BorshSerialize};
use near_sdk::{env, near_bindgen, AccountId};

#[near_bindgen]
#[derive(Default, BorshDeserialize, BorshSerialize)]
pub struct Contract {
    greeting: String,
}

#[near_bindgen]
impl Contract {
    pub fn get_greeting(&self) -> String {
        self.greeting.clone()
    }

    pub fn set_greeting(&mut self, message: String) {
        env::log_str(&format!("Saving greeting: {}", message));
        self.greeting = message;
    }

    pub fn say_hello(&self, account: AccountId) -> String {
        format!("{}, {}!", self.greeting, account)
    }
}"""

COUNTER = r"""use near_sdk::borsh::{BorshDeserialize, BorshSerialize};
use near_sdk::{env, near_bindgen};

#[near_bindgen]
#[derive(Default, BorshDeserialize, BorshSerialize)]
pub struct Counter {
    value: i32,
}

#[near_bindgen]
impl Counter {
    pub fn get_num(&self) -> i32 {
        self.value
    }

    pub fn increment(&mut self) {
        self.value += 1;
        env::log_str(&format!("Counter incremented to: {}", self.value));
    }

    pub fn decrement(&mut self) {
        self.value -= 1;
        env::log_str(&format!("Counter decremented to: {}", self.value));
    }

    pub fn reset(&mut self) {
        self.value = 0;
        env::log_str(&format!("Counter reset to: {}", self.value));
    }

    pub fn set(&mut self, value: i32) {
        self.value = value;
        env::log_str(&format!("Counter set to: {}", self.value));
    }
}"""

TEMPLATES: List[ContractTemplate] = [
    ContractTemplate(
        name="Hello World",
        description="Simple greeting contract",
        code=HELLO_WORLD,
    ),
    ContractTemplate(
        name="Counter",
        description="Simple counter with increment/decrement",
        code=COUNTER,
    ),
]


def get_templates() -> List[ContractTemplate]:
    return list(TEMPLATES)
